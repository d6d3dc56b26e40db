from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

class CashbookBalance(BaseModel):
    balance_date: date
    opening_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    closing_balance: Decimal
    is_edited: bool = False
    edited_by: Optional[str] = None

    class Config:
        from_attributes = True

class OpeningBalanceUpdate(BaseModel):
    balance_date: date
    opening_balance: Decimal

class CashbookMovement(BaseModel):
    journal_entry_id: int
    sequence_number: int
    entry_type: str
    description: Optional[str] = None
    reference: str
    payment_mode: str  # "Cash" or "Bank"
    amount: Decimal
    created_at: Optional[datetime] = None

class CashbookDay(BaseModel):
    balance: CashbookBalance
    incomes: List[CashbookMovement] = []
    expenses: List[CashbookMovement] = []
