import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from exceptions import AccountNotFoundError
from models import chart_of_accounts as chart_of_accounts_model
from schemas.chart_of_accounts import LedgerAccountCreate

logger = logging.getLogger(__name__)

LedgerAccount = chart_of_accounts_model.LedgerAccount

# Other subsystems match on these exact codes and names.
DEFAULT_ACCOUNTS = [
    {"account_code": "CASH", "account_name": "Cash", "account_type": "asset"},
    {"account_code": "BANK", "account_name": "Bank", "account_type": "asset"},
    {"account_code": "AR", "account_name": "Accounts Receivable", "account_type": "asset"},
    {"account_code": "AP", "account_name": "Accounts Payable", "account_type": "liability"},
    {"account_code": "SALES", "account_name": "Sales Revenue", "account_type": "income"},
    {"account_code": "PURCHASE", "account_name": "Purchase Expense", "account_type": "expense"},
    {"account_code": "WAGES", "account_name": "Wages Expense", "account_type": "expense"},
    {"account_code": "OTHER_INCOME", "account_name": "Other Income", "account_type": "income"},
    {"account_code": "OTHER_EXPENSE", "account_name": "Other Expense", "account_type": "expense"},
]

CASH_ACCOUNT_NAMES = ("Cash", "Bank")

def get_account_by_code(db: Session, account_code: str, tenant_id: str):
    return db.query(LedgerAccount).filter(
        LedgerAccount.account_code == account_code,
        LedgerAccount.tenant_id == tenant_id
    ).first()

def get_accounts(db: Session, tenant_id: str, account_type: str = None, skip: int = 0, limit: int = 100):
    query = db.query(LedgerAccount).filter(
        LedgerAccount.tenant_id == tenant_id,
        LedgerAccount.is_active == True
    )

    if account_type:
        query = query.filter(LedgerAccount.account_type == account_type)

    return query.order_by(LedgerAccount.id).offset(skip).limit(limit).all()

def count_accounts(db: Session, tenant_id: str) -> int:
    return db.query(LedgerAccount).filter(LedgerAccount.tenant_id == tenant_id).count()

def create_account(db: Session, account: LedgerAccountCreate, tenant_id: str):
    if get_account_by_code(db, account.account_code, tenant_id):
        raise ValueError(f"Account with code {account.account_code} already exists")

    db_account = LedgerAccount(**account.model_dump(), tenant_id=tenant_id)
    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    return db_account

def resolve_account(db: Session, tenant_id: str, code_or_name: Optional[str]):
    """Find an active account by code, falling back to its name."""
    if not code_or_name:
        raise AccountNotFoundError(code_or_name)

    base_query = db.query(LedgerAccount).filter(
        LedgerAccount.tenant_id == tenant_id,
        LedgerAccount.is_active == True
    )
    account = base_query.filter(LedgerAccount.account_code == code_or_name).first()
    if account is None:
        account = base_query.filter(LedgerAccount.account_name == code_or_name).first()
    if account is None:
        raise AccountNotFoundError(code_or_name)
    return account

def get_cash_account_ids(db: Session, tenant_id: str) -> List[int]:
    rows = db.query(LedgerAccount.id).filter(
        LedgerAccount.tenant_id == tenant_id,
        LedgerAccount.account_name.in_(CASH_ACCOUNT_NAMES)
    ).all()
    return [row.id for row in rows]

def initialize_default_accounts(db: Session, tenant_id: str) -> List[LedgerAccount]:
    """
    Insert the default chart of accounts for a tenant.

    Does not check for existing accounts: a second call trips the
    (tenant_id, account_code) unique constraint. Use ensure_default_accounts
    when the tenant may already be set up.
    """
    accounts = [
        LedgerAccount(**account_data, tenant_id=tenant_id, is_active=True, is_system_account=True)
        for account_data in DEFAULT_ACCOUNTS
    ]
    db.add_all(accounts)
    db.commit()
    for account in accounts:
        db.refresh(account)

    logger.info(f"Initialized {len(accounts)} default ledger accounts for tenant {tenant_id}")
    return accounts

def ensure_default_accounts(db: Session, tenant_id: str) -> bool:
    """Seed the default chart when the tenant has no accounts at all. Returns True if it seeded."""
    if count_accounts(db, tenant_id) > 0:
        return False
    initialize_default_accounts(db, tenant_id)
    return True

def cash_account_code(payment_mode) -> str:
    """Cash payments move the Cash account, everything else (card, UPI, transfer, cheque) moves Bank."""
    return "CASH" if getattr(payment_mode, "value", payment_mode) == "cash" else "BANK"
