from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, UniqueConstraint

from database import Base
from models.audit_mixin import TimestampMixin
from models.payment_tracking import PaymentTrackingMixin

class SalesOrder(Base, TimestampMixin, PaymentTrackingMixin):
    __tablename__ = "sales_orders"
    __table_args__ = (UniqueConstraint('tenant_id', 'so_number', name='_tenant_so_number_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    so_number = Column(Integer, index=True, nullable=False) # Tenant-specific sequential number
    customer_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False, index=True)
    order_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
