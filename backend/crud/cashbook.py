"""
Daily cash position tracking.

Every posted journal entry that touches the Cash or Bank account moves that
day's totals, and the new closing balance is carried forward as the opening
balance of every later day that has not been edited by hand.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from crud.audit_log import create_audit_log
from crud.chart_of_accounts import get_cash_account_ids
from models.cashbook_balance import CashbookBalance
from models.journal_entry import JournalEntry
from models.journal_line import JournalLine
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict
from utils.payment_calculations import round2, to_decimal

logger = logging.getLogger(__name__)

def as_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value

def recompute_closing(balance: CashbookBalance):
    balance.closing_balance = round2(
        to_decimal(balance.opening_balance) + to_decimal(balance.total_income) - to_decimal(balance.total_expense)
    )
    return balance.closing_balance

def get_balance(db: Session, tenant_id: str, balance_date: date) -> Optional[CashbookBalance]:
    return db.query(CashbookBalance).filter(
        CashbookBalance.tenant_id == tenant_id,
        CashbookBalance.balance_date == balance_date
    ).first()

def get_previous_balance(db: Session, tenant_id: str, balance_date: date) -> Optional[CashbookBalance]:
    return db.query(CashbookBalance).filter(
        CashbookBalance.tenant_id == tenant_id,
        CashbookBalance.balance_date < balance_date
    ).order_by(CashbookBalance.balance_date.desc()).first()

def _new_balance(db: Session, tenant_id: str, balance_date: date) -> CashbookBalance:
    previous = get_previous_balance(db, tenant_id, balance_date)
    opening = previous.closing_balance if previous else Decimal("0")
    return CashbookBalance(
        tenant_id=tenant_id,
        balance_date=balance_date,
        opening_balance=opening,
        total_income=Decimal("0"),
        total_expense=Decimal("0"),
        closing_balance=opening,
        is_edited=False,
    )

def get_or_create_balance(db: Session, tenant_id: str, balance_date: date) -> CashbookBalance:
    balance = get_balance(db, tenant_id, balance_date)
    if balance is None:
        balance = _new_balance(db, tenant_id, balance_date)
        db.add(balance)
        db.flush()
    return balance

def cascade_forward(db: Session, tenant_id: str, from_date: date, opening_balance) -> int:
    """
    Re-chain the opening balance of every later, un-edited day.

    Edited days are not fetched at all: they keep their stored values and the
    carried balance jumps straight over them to the next un-edited day.
    Returns the number of days updated. Does not commit.
    """
    subsequent = db.query(CashbookBalance).filter(
        CashbookBalance.tenant_id == tenant_id,
        CashbookBalance.balance_date > from_date,
        CashbookBalance.is_edited == False
    ).order_by(CashbookBalance.balance_date.asc()).all()

    current_opening = to_decimal(opening_balance)
    for balance in subsequent:
        balance.opening_balance = current_opening
        current_opening = recompute_closing(balance)

    db.flush()
    if subsequent:
        logger.debug(f"Cascaded cashbook opening balance for tenant {tenant_id} through {len(subsequent)} day(s) after {from_date}")
    return len(subsequent)

def apply_cash_movement(db: Session, tenant_id: str, entry_date, lines: List[JournalLine]) -> Optional[CashbookBalance]:
    """
    Fold the cash/bank part of freshly posted journal lines into that day's balance.

    Returns the updated balance, or None when the lines do not touch Cash or
    Bank. Flushes but does not commit; the posting engine owns the transaction.
    """
    cash_account_ids = set(get_cash_account_ids(db, tenant_id))

    cash_change = Decimal("0")
    for line in lines:
        if line.account_id in cash_account_ids:
            cash_change += to_decimal(line.debit) - to_decimal(line.credit)

    if cash_change == 0:
        return None

    balance_date = as_day(entry_date)
    balance = get_or_create_balance(db, tenant_id, balance_date)

    if cash_change > 0:
        balance.total_income = round2(to_decimal(balance.total_income) + cash_change)
    else:
        balance.total_expense = round2(to_decimal(balance.total_expense) + abs(cash_change))
    recompute_closing(balance)
    db.flush()

    cascade_forward(db, tenant_id, balance_date, balance.closing_balance)
    logger.info(f"Cashbook {balance_date} for tenant {tenant_id} moved by {cash_change}; closing now {balance.closing_balance}")
    return balance

def edit_opening_balance(db: Session, tenant_id: str, balance_date, new_opening, editor_id: Optional[str] = None) -> CashbookBalance:
    """
    Override a day's opening balance by hand.

    The day is flagged as edited (later cascades leave it alone), its closing
    balance is recomputed and the change flows forward from the next day.
    """
    balance_date = as_day(balance_date)
    balance = get_balance(db, tenant_id, balance_date)
    old_values = sqlalchemy_to_dict(balance)

    if balance is None:
        balance = CashbookBalance(
            tenant_id=tenant_id,
            balance_date=balance_date,
            total_income=Decimal("0"),
            total_expense=Decimal("0"),
        )
        db.add(balance)

    balance.opening_balance = round2(new_opening)
    balance.is_edited = True
    balance.edited_by = editor_id
    balance.updated_by = editor_id
    recompute_closing(balance)
    db.flush()

    cascade_forward(db, tenant_id, balance_date, balance.closing_balance)
    db.commit()

    create_audit_log(db=db, log_entry=AuditLogCreate(
        tenant_id=tenant_id,
        table_name='cashbook_balances',
        record_id=balance.id,
        changed_by=editor_id,
        action='EDIT_OPENING_BALANCE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(balance),
    ))
    db.refresh(balance)

    logger.info(f"Opening balance for {balance_date} set to {balance.opening_balance} by {editor_id} for tenant {tenant_id}")
    return balance

def get_cashbook_day(db: Session, tenant_id: str, day) -> dict:
    """
    Read one day of the cashbook: its balance plus the cash/bank movements behind it.

    A day without a stored balance is shown with the previous closing balance as
    its opening; nothing is written.
    """
    day = as_day(day)
    balance = get_balance(db, tenant_id, day) or _new_balance(db, tenant_id, day)

    cash_accounts = set(get_cash_account_ids(db, tenant_id))
    entries = db.query(JournalEntry).filter(
        JournalEntry.tenant_id == tenant_id,
        JournalEntry.entry_date == day
    ).all()
    entries_by_id = {entry.id: entry for entry in entries}

    incomes, expenses = [], []
    if entries_by_id and cash_accounts:
        lines = db.query(JournalLine).filter(
            JournalLine.tenant_id == tenant_id,
            JournalLine.journal_entry_id.in_(list(entries_by_id)),
            JournalLine.account_id.in_(list(cash_accounts))
        ).all()

        for line in lines:
            entry = entries_by_id[line.journal_entry_id]
            movement = {
                "journal_entry_id": entry.id,
                "sequence_number": entry.sequence_number,
                "entry_type": entry.entry_type,
                "description": entry.description,
                "reference": f"{entry.reference_type}-{entry.reference_id}" if entry.reference_type and entry.reference_id else "Manual",
                "payment_mode": line.account_name,
                "created_at": entry.created_at,
            }
            if line.debit > 0:
                incomes.append({**movement, "amount": line.debit})
            elif line.credit > 0:
                expenses.append({**movement, "amount": line.credit})

    # Latest first
    incomes.sort(key=lambda m: m["sequence_number"], reverse=True)
    expenses.sort(key=lambda m: m["sequence_number"], reverse=True)

    return {"balance": balance, "incomes": incomes, "expenses": expenses}
