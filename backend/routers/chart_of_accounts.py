from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import chart_of_accounts as chart_of_accounts_crud
from schemas.chart_of_accounts import LedgerAccount, LedgerAccountCreate
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/chart-of-accounts",
    tags=["Chart of Accounts"],
)
logger = logging.getLogger("chart_of_accounts")

@router.post("/initialize", response_model=List[LedgerAccount], status_code=status.HTTP_201_CREATED)
def initialize_accounts(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Seed the default chart of accounts for a tenant that has none yet."""
    if chart_of_accounts_crud.count_accounts(db, tenant_id) > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Chart of accounts is already initialized for this tenant"
        )
    return chart_of_accounts_crud.initialize_default_accounts(db, tenant_id)

@router.post("/", response_model=LedgerAccount, status_code=status.HTTP_201_CREATED)
def create_account(
    account: LedgerAccountCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        db_account = chart_of_accounts_crud.create_account(db, account, tenant_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.info(f"Ledger account {db_account.account_code} created for tenant {tenant_id}")
    return db_account

@router.get("/", response_model=List[LedgerAccount])
def get_accounts(
    account_type: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return chart_of_accounts_crud.get_accounts(db, tenant_id, account_type=account_type, skip=skip, limit=limit)
