from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date
from decimal import Decimal

from models.payments import PaymentMode

class ManualEntryCreate(BaseModel):
    entry_date: date
    type: Literal["income", "expense"]
    amount: Decimal = Field(..., gt=0)
    payment_mode: PaymentMode = PaymentMode.CASH
    category: Optional[str] = None
    description: Optional[str] = None

class WagesCreate(BaseModel):
    entry_date: date
    total_wages: Decimal = Field(..., gt=0)
    description: Optional[str] = None
