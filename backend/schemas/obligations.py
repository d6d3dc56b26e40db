from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal

from models.payment_tracking import PaymentStatus, PaymentType

class ObligationCreate(BaseModel):
    partner_id: int
    transaction_date: date
    total_amount: Decimal = Field(..., gt=0)
    payment_type: PaymentType = PaymentType.CREDIT
    notes: Optional[str] = None

class Obligation(BaseModel):
    """Any of the four invoice-like records, flattened to what the ledger cares about."""
    obligation_type: str
    id: int
    number: int
    partner_id: int
    transaction_date: date
    total_amount: Decimal
    amount_paid: Decimal
    amount_due: Decimal
    payment_status: PaymentStatus
    payment_type: str
