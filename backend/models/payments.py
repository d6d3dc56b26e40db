from sqlalchemy import Column, Integer, Numeric, Date, String, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship
import enum

from database import Base
from models.audit_mixin import AuditMixin, TimestampMixin


class PaymentDirection(str, enum.Enum):
    RECEIVED = "received"  # customer pays us
    MADE = "made"          # we pay a vendor


class PaymentMode(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"


class JournalPostingStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class AllocationStatus(str, enum.Enum):
    CLEARED = "cleared"
    PARTIAL = "partial"


class Payment(Base, AuditMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    direction = Column(Enum(PaymentDirection), nullable=False)
    partner_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_mode = Column(String(20), nullable=False, default=PaymentMode.CASH.value)
    payment_date = Column(Date, nullable=False, index=True)
    reference_number = Column(String, nullable=True) # Cheque number, transaction ID etc.
    notes = Column(Text, nullable=True)

    # Outcome of the single journal post made for this payment
    journal_entry_status = Column(Enum(JournalPostingStatus), nullable=False, default=JournalPostingStatus.PENDING)
    journal_entry_error = Column(Text, nullable=True)
    journal_entry_id = Column(Integer, nullable=True)

    allocations = relationship(
        "PaymentAllocation",
        back_populates="payment",
        cascade="all, delete-orphan",
        order_by="PaymentAllocation.id",
    )


class PaymentAllocation(Base, TimestampMixin):
    """The part of a payment applied to one obligation."""
    __tablename__ = "payment_allocations"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=False, index=True)
    obligation_type = Column(String(20), nullable=False)  # sales_order, direct_sale, purchase_order, direct_purchase
    obligation_id = Column(Integer, nullable=False)
    amount_allocated = Column(Numeric(12, 2), nullable=False)
    status = Column(Enum(AllocationStatus), nullable=False)

    payment = relationship("Payment", back_populates="allocations")
