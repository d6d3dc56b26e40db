from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, UniqueConstraint

from database import Base
from models.audit_mixin import TimestampMixin
from models.payment_tracking import PaymentTrackingMixin

class DirectPurchase(Base, TimestampMixin, PaymentTrackingMixin):
    """One-off purchase billed without a standing purchase order."""
    __tablename__ = "direct_purchases"
    __table_args__ = (UniqueConstraint('tenant_id', 'purchase_number', name='_tenant_purchase_number_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    purchase_number = Column(Integer, index=True, nullable=False)
    vendor_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False, index=True)
    purchase_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
