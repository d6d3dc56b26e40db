import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from crud import cashbook as cashbook_crud
from crud.cashbook import as_day
from crud.chart_of_accounts import resolve_account
from exceptions import AccountNotFoundError, EmptyEntryError, InvalidJournalLineError, UnbalancedEntryError
from models import journal_entry as journal_entry_model
from models import journal_line as journal_line_model
from utils.payment_calculations import ROUNDING_TOLERANCE, round2, to_decimal
from utils.sequence import insert_with_sequence

logger = logging.getLogger(__name__)

JournalEntry = journal_entry_model.JournalEntry
JournalLine = journal_line_model.JournalLine

def _enum_value(value):
    return getattr(value, "value", value)

def _validate_lines(lines: List[dict]):
    if not lines:
        raise EmptyEntryError()

    total_debit = Decimal("0")
    total_credit = Decimal("0")
    for index, line in enumerate(lines, start=1):
        debit = to_decimal(line.get("debit") or 0)
        credit = to_decimal(line.get("credit") or 0)
        if debit < 0 or credit < 0:
            raise InvalidJournalLineError(f"Line {index}: debit and credit cannot be negative")
        if round2(debit) > 0 and round2(credit) > 0:
            raise InvalidJournalLineError(f"Line {index}: a journal line cannot have both debit and credit")
        if round2(debit) == 0 and round2(credit) == 0:
            raise InvalidJournalLineError(f"Line {index}: a journal line must have either debit or credit")
        total_debit += debit
        total_credit += credit

    if abs(total_debit - total_credit) > ROUNDING_TOLERANCE:
        raise UnbalancedEntryError(total_debit, total_credit)
    return total_debit

def _resolve_line_account(db: Session, tenant_id: str, line: dict):
    account_code = line.get("account_code")
    account_name = line.get("account_name")
    for ref in (account_code, account_name):
        if not ref:
            continue
        try:
            return resolve_account(db, tenant_id, ref)
        except AccountNotFoundError:
            continue
    raise AccountNotFoundError(account_code or account_name)

def post_journal_entry(
    db: Session,
    tenant_id: str,
    entry_date,
    entry_type,
    reference_type,
    reference_id: Optional[int],
    description: Optional[str],
    lines: List[dict],
    actor_id: Optional[str] = None,
):
    """
    Validate and persist a balanced journal entry with its lines.

    Each line is a dict with account_code or account_name, debit, credit and an
    optional description. Everything is validated and every account resolved
    before the first write; the entry, its lines and the cashbook update are
    committed together. Returns (entry, lines).
    """
    total_debit = _validate_lines(lines)
    accounts = [_resolve_line_account(db, tenant_id, line) for line in lines]
    account_refs = [(account.id, account.account_name) for account in accounts]
    entry_day = as_day(entry_date)

    try:
        db_entry = insert_with_sequence(
            db,
            JournalEntry,
            "sequence_number",
            tenant_id,
            lambda number: JournalEntry(
                tenant_id=tenant_id,
                sequence_number=number,
                entry_date=entry_day,
                entry_type=_enum_value(entry_type),
                reference_type=_enum_value(reference_type),
                reference_id=reference_id,
                description=description,
                total_amount=round2(total_debit),
                created_by=actor_id,
            ),
        )

        db_lines = []
        for line, (account_id, account_name) in zip(lines, account_refs):
            db_lines.append(JournalLine(
                tenant_id=tenant_id,
                journal_entry_id=db_entry.id,
                account_id=account_id,
                account_name=account_name,
                debit=round2(line.get("debit") or 0),
                credit=round2(line.get("credit") or 0),
                description=line.get("description") or description,
                created_by=actor_id,
            ))
        db.add_all(db_lines)
        db.flush()

        cashbook_crud.apply_cash_movement(db, tenant_id, entry_day, db_lines)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_entry)
    for db_line in db_lines:
        db.refresh(db_line)

    logger.info(
        f"Journal entry #{db_entry.sequence_number} ({db_entry.entry_type}) posted for tenant {tenant_id}: "
        f"{len(db_lines)} lines, total {db_entry.total_amount}"
    )
    return db_entry, db_lines

def get_journal_entry(db: Session, entry_id: int, tenant_id: str):
    """
    Retrieves a single journal entry by its ID.
    """
    return db.query(JournalEntry).filter(
        JournalEntry.id == entry_id,
        JournalEntry.tenant_id == tenant_id
    ).first()

def get_lines_for_entry(db: Session, entry_id: int, tenant_id: str):
    return db.query(JournalLine).filter(
        JournalLine.journal_entry_id == entry_id,
        JournalLine.tenant_id == tenant_id
    ).order_by(JournalLine.id).all()

def get_journal_entries(
    db: Session,
    tenant_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
):
    """
    Retrieves a list of journal entries with optional date filtering.
    """
    query = db.query(JournalEntry).filter(JournalEntry.tenant_id == tenant_id)

    if start_date:
        query = query.filter(JournalEntry.entry_date >= start_date)
    if end_date:
        query = query.filter(JournalEntry.entry_date <= end_date)

    return query.order_by(JournalEntry.entry_date.desc(), JournalEntry.sequence_number.desc()).offset(skip).limit(limit).all()
