from sqlalchemy import Column, Integer, String, Text, Enum, Boolean, Date, Numeric
import enum

from database import Base
from models.audit_mixin import TimestampMixin

class PartnerStatus(enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    BLOCKED = "Blocked"

class BusinessPartner(Base, TimestampMixin):
    """A customer and/or vendor, with the balances the payment engine keeps in sync."""
    __tablename__ = "business_partners"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    email = Column(String, nullable=True)
    status = Column(Enum(PartnerStatus), default=PartnerStatus.ACTIVE, nullable=False)
    is_vendor = Column(Boolean, default=True, nullable=False)
    is_customer = Column(Boolean, default=True, nullable=False)

    # Sum of amount_due over the partner's open sales / purchases
    current_receivable = Column(Numeric(12, 2), default=0, nullable=False)
    current_payable = Column(Numeric(12, 2), default=0, nullable=False)
    # Unapplied money carried forward: received from the customer / paid to the vendor
    overpaid_amount = Column(Numeric(12, 2), default=0, nullable=False)
    advance_paid_amount = Column(Numeric(12, 2), default=0, nullable=False)
    last_payment_date = Column(Date, nullable=True)
    last_payment_amount = Column(Numeric(12, 2), nullable=True)
