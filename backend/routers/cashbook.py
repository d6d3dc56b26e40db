from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
import logging

from database import get_db
from crud import cashbook as cashbook_crud
from models.audit_mixin import local_now
from schemas.cashbook import CashbookBalance, CashbookDay, OpeningBalanceUpdate
from utils.tenancy import get_tenant_id, get_actor_id

router = APIRouter(prefix="/cashbook", tags=["Cashbook"])
logger = logging.getLogger("cashbook")

@router.get("/", response_model=CashbookDay)
def get_cashbook(
    day: Optional[date] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Cash position for one day (today when no day is given) with its income and expense movements."""
    return cashbook_crud.get_cashbook_day(db, tenant_id, day or local_now().date())

@router.put("/opening-balance", response_model=CashbookBalance)
def update_opening_balance(
    update: OpeningBalanceUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    try:
        return cashbook_crud.edit_opening_balance(
            db,
            tenant_id=tenant_id,
            balance_date=update.balance_date,
            new_opening=update.opening_balance,
            editor_id=actor_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
