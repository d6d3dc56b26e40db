from sqlalchemy import Column, Numeric, Enum, String
import enum


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class PaymentType(str, enum.Enum):
    CASH = "cash"
    CREDIT = "credit"


class PaymentTrackingMixin:
    """Total / paid / due / status columns shared by every obligation table.

    amount_due and payment_status are derived; write paths set them through
    crud.obligations.refresh_payment_state, never by hand.
    """
    total_amount = Column(Numeric(12, 2), default=0, nullable=False)
    amount_paid = Column(Numeric(12, 2), default=0, server_default='0', nullable=False)
    amount_due = Column(Numeric(12, 2), default=0, server_default='0', nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True)
    payment_type = Column(String(10), default=PaymentType.CREDIT.value, nullable=False)
