import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud import business_partners as business_partners_crud
from crud.chart_of_accounts import ensure_default_accounts
from crud.journal_entry import post_journal_entry
from crud.obligations import ObligationKind, get_kind, refresh_payment_state
from crud.cashbook import as_day
from exceptions import AccountingError, InvalidAmountError
from models.journal_entry import JournalEntryType
from models.payment_tracking import PaymentType
from models.payments import PaymentDirection
from utils.payment_calculations import round2
from utils.sequence import insert_with_sequence

logger = logging.getLogger(__name__)

def invoice_lines(direction: PaymentDirection, payment_type: PaymentType, amount, party_name: str):
    """Journal lines recording a sale or purchase at the moment it is billed."""
    if direction == PaymentDirection.RECEIVED:
        if payment_type == PaymentType.CASH:
            return [
                {"account_code": "CASH", "debit": amount, "credit": 0, "description": f"Cash sale to {party_name}"},
                {"account_code": "SALES", "debit": 0, "credit": amount, "description": f"Sale to {party_name}"},
            ]
        return [
            {"account_code": "AR", "debit": amount, "credit": 0, "description": f"Receivable from {party_name}"},
            {"account_code": "SALES", "debit": 0, "credit": amount, "description": f"Sale to {party_name}"},
        ]

    if payment_type == PaymentType.CASH:
        return [
            {"account_code": "PURCHASE", "debit": amount, "credit": 0, "description": f"Purchase from {party_name}"},
            {"account_code": "CASH", "debit": 0, "credit": amount, "description": f"Cash paid to {party_name}"},
        ]
    return [
        {"account_code": "PURCHASE", "debit": amount, "credit": 0, "description": f"Purchase from {party_name}"},
        {"account_code": "AP", "debit": 0, "credit": amount, "description": f"Payable to {party_name}"},
    ]

def _post_invoice(db: Session, tenant_id: str, kind: ObligationKind, obligation, party_name: str, actor_id: Optional[str]):
    payment_type = PaymentType(obligation.payment_type)
    number = getattr(obligation, kind.number_column)
    try:
        ensure_default_accounts(db, tenant_id)
        post_journal_entry(
            db,
            tenant_id=tenant_id,
            entry_date=getattr(obligation, kind.date_column),
            entry_type=JournalEntryType.SALES_INVOICE if kind.direction == PaymentDirection.RECEIVED else JournalEntryType.PURCHASE_INVOICE,
            reference_type=kind.reference_type,
            reference_id=obligation.id,
            description=f"{kind.label} #{number} - {party_name} ({payment_type.value})",
            lines=invoice_lines(kind.direction, payment_type, obligation.total_amount, party_name),
            actor_id=actor_id,
        )
    except (AccountingError, SQLAlchemyError) as e:
        # The invoice stands even when the books could not be written
        db.rollback()
        logger.error(f"Journal entry creation failed for {kind.name} {obligation.id} (tenant {tenant_id}): {e}")

def create_obligation(
    db: Session,
    tenant_id: str,
    obligation_type: str,
    partner_id: int,
    total_amount,
    transaction_date,
    payment_type: PaymentType = PaymentType.CREDIT,
    notes: Optional[str] = None,
    actor_id: Optional[str] = None,
):
    """
    Bill a party: create the obligation, refresh the party's outstanding total
    and post the invoice journal entry.

    Cash transactions are settled on the spot (amount_paid = total).
    """
    kind = get_kind(obligation_type)
    total = round2(total_amount)
    if total <= 0:
        raise InvalidAmountError("Total amount must be greater than 0")
    payment_type = PaymentType(payment_type)

    partner = business_partners_crud.get_partner(db, tenant_id, partner_id)
    party_name = partner.name

    def build(number):
        obligation = kind.model(**{
            "tenant_id": tenant_id,
            kind.number_column: number,
            kind.party_column: partner_id,
            kind.date_column: as_day(transaction_date),
            "total_amount": total,
            "amount_paid": total if payment_type == PaymentType.CASH else 0,
            "payment_type": payment_type.value,
            "notes": notes,
            "created_by": actor_id,
        })
        return refresh_payment_state(obligation)

    obligation = insert_with_sequence(db, kind.model, kind.number_column, tenant_id, build)
    db.commit()

    partner = business_partners_crud.get_partner(db, tenant_id, partner_id)
    business_partners_crud.recompute_outstanding(db, tenant_id, partner, kind.direction)
    db.commit()
    db.refresh(obligation)

    logger.info(f"{kind.label} #{getattr(obligation, kind.number_column)} ({payment_type.value}, {total}) created for partner {partner_id}, tenant {tenant_id}")

    _post_invoice(db, tenant_id, kind, obligation, party_name, actor_id)
    return obligation
