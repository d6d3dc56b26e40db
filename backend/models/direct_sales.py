from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, UniqueConstraint

from database import Base
from models.audit_mixin import TimestampMixin
from models.payment_tracking import PaymentTrackingMixin

class DirectSale(Base, TimestampMixin, PaymentTrackingMixin):
    """One-off sale billed without a standing sales order."""
    __tablename__ = "direct_sales"
    __table_args__ = (UniqueConstraint('tenant_id', 'sale_number', name='_tenant_sale_number_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    sale_number = Column(Integer, index=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False, index=True)
    sale_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
