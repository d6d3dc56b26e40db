from pydantic import BaseModel, Field, model_validator
from decimal import Decimal
from typing import Optional

class JournalLineCreate(BaseModel):
    """One requested line; the account is looked up by code first, then by name."""
    account_code: Optional[str] = None
    account_name: Optional[str] = None
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)
    description: Optional[str] = None

    @model_validator(mode='after')
    def check_account_reference(self):
        if not self.account_code and not self.account_name:
            raise ValueError('Either account_code or account_name is required.')
        return self

class JournalLine(BaseModel):
    id: int
    journal_entry_id: int
    account_id: int
    account_name: str
    debit: Decimal
    credit: Decimal
    description: Optional[str] = None

    class Config:
        from_attributes = True
