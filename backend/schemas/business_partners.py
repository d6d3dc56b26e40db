from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from models.business_partners import PartnerStatus

class BusinessPartnerBase(BaseModel):
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[EmailStr] = None
    status: PartnerStatus = PartnerStatus.ACTIVE
    is_vendor: bool = True
    is_customer: bool = True

class BusinessPartnerCreate(BusinessPartnerBase):
    pass

class BusinessPartner(BusinessPartnerBase):
    id: int
    tenant_id: Optional[str] = None
    current_receivable: Decimal = Decimal("0")
    current_payable: Decimal = Decimal("0")
    overpaid_amount: Decimal = Decimal("0")
    advance_paid_amount: Decimal = Decimal("0")
    last_payment_date: Optional[date] = None
    last_payment_amount: Optional[Decimal] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
