from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from models.chart_of_accounts import AccountType

VALID_ACCOUNT_TYPES = [t.value for t in AccountType]

class LedgerAccountBase(BaseModel):
    account_code: str
    account_name: str
    account_type: str  # asset, liability, income, expense, equity
    description: Optional[str] = None
    is_active: bool = True

    @field_validator('account_type')
    @classmethod
    def validate_account_type(cls, v):
        if v not in VALID_ACCOUNT_TYPES:
            raise ValueError(f"account_type must be one of {VALID_ACCOUNT_TYPES}")
        return v

class LedgerAccountCreate(LedgerAccountBase):
    pass

class LedgerAccount(LedgerAccountBase):
    id: int
    tenant_id: str
    is_system_account: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
