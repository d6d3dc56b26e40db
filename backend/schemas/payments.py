from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from models.payments import PaymentDirection, PaymentMode, JournalPostingStatus, AllocationStatus
from models.payment_tracking import PaymentStatus

class PaymentDetails(BaseModel):
    amount: Decimal = Field(..., gt=0)
    payment_mode: PaymentMode = PaymentMode.CASH
    payment_date: date
    reference_number: Optional[str] = None
    notes: Optional[str] = None

class PartyPaymentCreate(PaymentDetails):
    partner_id: int
    direction: PaymentDirection = PaymentDirection.RECEIVED

class ObligationPaymentCreate(PaymentDetails):
    obligation_type: str  # sales_order, direct_sale, purchase_order, direct_purchase
    obligation_id: int

class PaymentAllocation(BaseModel):
    obligation_type: str
    obligation_id: int
    amount_allocated: Decimal
    status: AllocationStatus

    class Config:
        from_attributes = True

class Payment(BaseModel):
    id: int
    tenant_id: str
    direction: PaymentDirection
    partner_id: int
    amount: Decimal
    payment_mode: str
    payment_date: date
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    journal_entry_status: JournalPostingStatus
    journal_entry_error: Optional[str] = None
    journal_entry_id: Optional[int] = None
    allocations: List[PaymentAllocation] = []
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    class Config:
        from_attributes = True

class ObligationUpdate(BaseModel):
    obligation_type: str
    obligation_id: int
    amount_paid: Decimal
    amount_due: Decimal
    payment_status: PaymentStatus

class PaymentResult(BaseModel):
    payment: Payment
    allocations: List[PaymentAllocation]
    obligations_updated: List[ObligationUpdate]
    overpaid_amount: Decimal
    new_outstanding: Decimal
    warning: Optional[str] = None
