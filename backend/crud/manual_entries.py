"""Cash movements entered by hand: other income, other expenses and daily wages."""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from crud.chart_of_accounts import cash_account_code, ensure_default_accounts
from crud.journal_entry import post_journal_entry
from exceptions import InvalidAmountError
from models.journal_entry import JournalEntryType, ReferenceType
from utils.payment_calculations import round2

logger = logging.getLogger(__name__)

MANUAL_ENTRY_KINDS = ("income", "expense")

def record_manual_entry(
    db: Session,
    tenant_id: str,
    entry_date: date,
    kind: str,
    amount,
    payment_mode: str = "cash",
    category: Optional[str] = None,
    description: Optional[str] = None,
    actor_id: Optional[str] = None,
):
    if kind not in MANUAL_ENTRY_KINDS:
        raise ValueError("Type must be income or expense")
    amount = round2(amount)
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than 0")

    ensure_default_accounts(db, tenant_id)
    cash_code = cash_account_code(payment_mode)

    if kind == "income":
        # Income: Debit Cash/Bank, Credit Other Income
        lines = [
            {"account_code": cash_code, "debit": amount, "credit": 0},
            {"account_code": "OTHER_INCOME", "debit": 0, "credit": amount},
        ]
        entry_type = JournalEntryType.MANUAL_INCOME
    else:
        # Expense: Debit Other Expense, Credit Cash/Bank
        lines = [
            {"account_code": "OTHER_EXPENSE", "debit": amount, "credit": 0},
            {"account_code": cash_code, "debit": 0, "credit": amount},
        ]
        entry_type = JournalEntryType.MANUAL_EXPENSE

    return post_journal_entry(
        db,
        tenant_id=tenant_id,
        entry_date=entry_date,
        entry_type=entry_type,
        reference_type=ReferenceType.MANUAL,
        reference_id=None,
        description=f"{category or kind} - {description or ''}".strip(" -"),
        lines=lines,
        actor_id=actor_id,
    )

def record_wages(db: Session, tenant_id: str, entry_date: date, total_wages, description: Optional[str] = None, actor_id: Optional[str] = None):
    total_wages = round2(total_wages)
    if total_wages <= 0:
        raise InvalidAmountError("Total wages must be greater than 0")

    ensure_default_accounts(db, tenant_id)
    return post_journal_entry(
        db,
        tenant_id=tenant_id,
        entry_date=entry_date,
        entry_type=JournalEntryType.WAGES,
        reference_type=ReferenceType.MANUAL,
        reference_id=None,
        description=description or f"Daily wages for {entry_date.isoformat()}",
        lines=[
            {"account_code": "WAGES", "debit": total_wages, "credit": 0},
            {"account_code": "CASH", "debit": 0, "credit": total_wages},
        ],
        actor_id=actor_id,
    )
