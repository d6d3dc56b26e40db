"""
Payment allocation engine.

A party-level payment is spread over the party's open invoices oldest first;
a single-invoice payment goes to exactly one. Either way one Payment row is
written with its allocations, the party's outstanding total is recomputed
from scratch, and one journal entry is posted for the whole amount.

Journal posting happens after the payment is committed. If it fails the
payment still stands and is flagged journal_entry_status='failed' for manual
reconciliation.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud import business_partners as business_partners_crud
from crud.audit_log import create_audit_log
from crud.cashbook import as_day
from crud.chart_of_accounts import cash_account_code, ensure_default_accounts
from crud.journal_entry import post_journal_entry
from crud.obligations import ObligationKind, get_kind, get_obligation, get_outstanding_obligations, refresh_payment_state
from exceptions import AccountingError, InvalidAmountError, ObligationNotFoundError, OverpaymentError, PaymentNotFoundError
from models.audit_mixin import local_now
from models.journal_entry import JournalEntryType, ReferenceType
from models.payments import AllocationStatus, JournalPostingStatus, Payment, PaymentAllocation, PaymentDirection
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict
from utils.payment_calculations import ROUNDING_TOLERANCE, round2, to_decimal

logger = logging.getLogger(__name__)


def payment_lines(direction: PaymentDirection, payment_mode, amount, party_name: str) -> List[dict]:
    cash_code = cash_account_code(payment_mode)
    if direction == PaymentDirection.RECEIVED:
        return [
            {"account_code": cash_code, "debit": amount, "credit": 0, "description": f"Payment received from {party_name}"},
            {"account_code": "AR", "debit": 0, "credit": amount, "description": f"Receivable settled by {party_name}"},
        ]
    return [
        {"account_code": "AP", "debit": amount, "credit": 0, "description": f"Payable settled to {party_name}"},
        {"account_code": cash_code, "debit": 0, "credit": amount, "description": f"Payment made to {party_name}"},
    ]


def _apply_to_obligation(kind: ObligationKind, obligation, pay: Decimal, tenant_id: str, actor_id: Optional[str]):
    """Book `pay` against one obligation and return the allocation row and the new state."""
    # Exact comparison on purpose: payment_status below tolerates 0.01, "cleared" does not
    cleared = to_decimal(obligation.amount_paid) + pay >= to_decimal(obligation.total_amount)

    allocation = PaymentAllocation(
        tenant_id=tenant_id,
        obligation_type=kind.name,
        obligation_id=obligation.id,
        amount_allocated=pay,
        status=AllocationStatus.CLEARED if cleared else AllocationStatus.PARTIAL,
    )

    obligation.amount_paid = round2(to_decimal(obligation.amount_paid) + pay)
    refresh_payment_state(obligation)
    obligation.updated_by = actor_id

    update = {
        "obligation_type": kind.name,
        "obligation_id": obligation.id,
        "amount_paid": obligation.amount_paid,
        "amount_due": obligation.amount_due,
        "payment_status": obligation.payment_status,
    }
    return allocation, update


def _post_payment_journal(db: Session, tenant_id: str, payment: Payment, party_name: str, actor_id: Optional[str]) -> Optional[str]:
    """Post the single journal entry for a committed payment. Returns a warning on failure."""
    direction = PaymentDirection(payment.direction)
    payment_id = payment.id
    warning = None
    try:
        ensure_default_accounts(db, tenant_id)
        entry, _ = post_journal_entry(
            db,
            tenant_id=tenant_id,
            entry_date=payment.payment_date,
            entry_type=JournalEntryType.PAYMENT_RECEIVED if direction == PaymentDirection.RECEIVED else JournalEntryType.PAYMENT_MADE,
            reference_type=ReferenceType.PAYMENT,
            reference_id=payment_id,
            description=f"Payment {direction.value} - {party_name} ({payment.payment_mode})",
            lines=payment_lines(direction, payment.payment_mode, payment.amount, party_name),
            actor_id=actor_id,
        )
        payment.journal_entry_status = JournalPostingStatus.SUCCESS
        payment.journal_entry_id = entry.id
        payment.journal_entry_error = None
    except (AccountingError, SQLAlchemyError) as e:
        db.rollback()
        payment.journal_entry_status = JournalPostingStatus.FAILED
        payment.journal_entry_error = str(e)
        warning = f"Payment recorded but journal entry failed: {e}"
        logger.warning(f"Journal entry for payment {payment_id} failed for tenant {tenant_id}: {e}")

    db.commit()
    db.refresh(payment)
    return warning


def _validated_amount(amount) -> Decimal:
    amount = round2(amount)
    if amount <= 0:
        raise InvalidAmountError("Payment amount must be greater than 0")
    return amount


def allocate_to_party(
    db: Session,
    tenant_id: str,
    partner_id: int,
    amount,
    payment_mode: str = "cash",
    payment_date=None,
    reference_number: Optional[str] = None,
    notes: Optional[str] = None,
    direction: PaymentDirection = PaymentDirection.RECEIVED,
    actor_id: Optional[str] = None,
) -> dict:
    """
    Spread one lump payment over a party's open obligations, oldest first.

    Returns a dict with the payment, its allocations, the obligations touched,
    the amount carried forward as overpaid credit and the party's recomputed
    outstanding total.
    """
    amount = _validated_amount(amount)
    direction = PaymentDirection(direction)
    payment_mode = getattr(payment_mode, "value", payment_mode)
    payment_day = as_day(payment_date) or local_now().date()

    partner = business_partners_crud.get_partner(db, tenant_id, partner_id)
    party_name = partner.name

    remaining = amount
    allocations = []
    obligations_updated = []

    for kind, obligation in get_outstanding_obligations(db, tenant_id, partner_id, direction):
        if remaining <= ROUNDING_TOLERANCE:
            break

        due = round2(obligation.amount_due)
        if due <= ROUNDING_TOLERANCE:
            continue

        pay = round2(min(remaining, due))
        allocation, update = _apply_to_obligation(kind, obligation, pay, tenant_id, actor_id)
        db.flush()

        allocations.append(allocation)
        obligations_updated.append(update)
        remaining = round2(remaining - pay)

    payment = Payment(
        tenant_id=tenant_id,
        direction=direction,
        partner_id=partner_id,
        amount=amount,
        payment_mode=payment_mode,
        payment_date=payment_day,
        reference_number=reference_number,
        notes=notes,
        journal_entry_status=JournalPostingStatus.PENDING,
        created_by=actor_id,
        allocations=allocations,
    )
    db.add(payment)

    partner.last_payment_date = payment_day
    partner.last_payment_amount = amount
    new_outstanding = business_partners_crud.recompute_outstanding(db, tenant_id, partner, direction)

    overpaid_amount = remaining if remaining > 0 else Decimal("0")
    if overpaid_amount > 0:
        business_partners_crud.add_carried_credit(partner, direction, overpaid_amount)

    db.commit()
    db.refresh(payment)

    logger.info(
        f"Party payment {payment.id} of {amount} ({direction.value}) for partner {partner_id}, tenant {tenant_id}: "
        f"{len(allocations)} allocation(s), overpaid {overpaid_amount}, outstanding now {new_outstanding}"
    )

    warning = _post_payment_journal(db, tenant_id, payment, party_name, actor_id)
    return {
        "payment": payment,
        "allocations": payment.allocations,
        "obligations_updated": obligations_updated,
        "overpaid_amount": overpaid_amount,
        "new_outstanding": new_outstanding,
        "warning": warning,
    }


def record_obligation_payment(
    db: Session,
    tenant_id: str,
    obligation_type: str,
    obligation_id: int,
    amount,
    payment_mode: str = "cash",
    payment_date=None,
    reference_number: Optional[str] = None,
    notes: Optional[str] = None,
    actor_id: Optional[str] = None,
) -> dict:
    """Pay one specific obligation directly. Same result shape as allocate_to_party."""
    amount = _validated_amount(amount)
    kind = get_kind(obligation_type)
    payment_mode = getattr(payment_mode, "value", payment_mode)
    payment_day = as_day(payment_date) or local_now().date()

    obligation = get_obligation(db, tenant_id, obligation_type, obligation_id)
    amount_due = round2(obligation.amount_due)
    if amount > amount_due:
        raise OverpaymentError(amount, amount_due)

    partner_id = getattr(obligation, kind.party_column)
    partner = business_partners_crud.get_partner(db, tenant_id, partner_id)
    party_name = partner.name

    allocation, update = _apply_to_obligation(kind, obligation, amount, tenant_id, actor_id)

    payment = Payment(
        tenant_id=tenant_id,
        direction=kind.direction,
        partner_id=partner_id,
        amount=amount,
        payment_mode=payment_mode,
        payment_date=payment_day,
        reference_number=reference_number,
        notes=notes,
        journal_entry_status=JournalPostingStatus.PENDING,
        created_by=actor_id,
        allocations=[allocation],
    )
    db.add(payment)

    partner.last_payment_date = payment_day
    partner.last_payment_amount = amount
    new_outstanding = business_partners_crud.recompute_outstanding(db, tenant_id, partner, kind.direction)

    db.commit()
    db.refresh(payment)

    logger.info(f"Payment {payment.id} of {amount} recorded against {kind.name} {obligation_id} for tenant {tenant_id}")

    warning = _post_payment_journal(db, tenant_id, payment, party_name, actor_id)
    return {
        "payment": payment,
        "allocations": payment.allocations,
        "obligations_updated": [update],
        "overpaid_amount": Decimal("0"),
        "new_outstanding": new_outstanding,
        "warning": warning,
    }


def get_payment(db: Session, tenant_id: str, payment_id: int, include_deleted: bool = False) -> Payment:
    payment = db.query(Payment).execution_options(include_deleted=include_deleted).filter(
        Payment.id == payment_id,
        Payment.tenant_id == tenant_id
    ).first()
    if payment is None:
        raise PaymentNotFoundError(payment_id)
    return payment


def get_payments_for_party(db: Session, tenant_id: str, partner_id: int, direction: Optional[PaymentDirection] = None, skip: int = 0, limit: int = 50):
    query = db.query(Payment).filter(Payment.tenant_id == tenant_id, Payment.partner_id == partner_id)
    if direction:
        query = query.filter(Payment.direction == PaymentDirection(direction))
    return query.order_by(Payment.payment_date.desc(), Payment.id.desc()).offset(skip).limit(limit).all()


def get_failed_journal_payments(db: Session, tenant_id: str):
    """Payments whose journal entry could not be posted and need reconciling by hand."""
    return db.query(Payment).filter(
        Payment.tenant_id == tenant_id,
        Payment.journal_entry_status == JournalPostingStatus.FAILED
    ).order_by(Payment.payment_date.asc(), Payment.id.asc()).all()


def get_deleted_payments(db: Session, tenant_id: str):
    """Deleted payments. Their journal entries still stand and need an adjusting entry."""
    return db.query(Payment).execution_options(include_deleted=True).filter(
        Payment.tenant_id == tenant_id,
        Payment.deleted_at.isnot(None)
    ).order_by(Payment.deleted_at.asc(), Payment.id.asc()).all()


def delete_payment(db: Session, tenant_id: str, payment_id: int, actor_id: Optional[str] = None) -> Payment:
    """
    Soft-delete a payment and give its allocations back to the obligations.

    The journal entry posted for the payment is NOT reversed, so the general
    ledger and the cashbook keep counting it. Deleted payments therefore need
    a manual adjusting entry; a warning is logged for each one.
    """
    payment = get_payment(db, tenant_id, payment_id)
    direction = PaymentDirection(payment.direction)
    old_values = sqlalchemy_to_dict(payment)

    allocated_total = Decimal("0")
    for allocation in payment.allocations:
        try:
            obligation = get_obligation(db, tenant_id, allocation.obligation_type, allocation.obligation_id)
        except ObligationNotFoundError:
            logger.warning(f"Payment {payment_id}: {allocation.obligation_type} {allocation.obligation_id} no longer exists, allocation skipped")
            continue
        obligation.amount_paid = round2(max(Decimal("0"), to_decimal(obligation.amount_paid) - to_decimal(allocation.amount_allocated)))
        refresh_payment_state(obligation)
        obligation.updated_by = actor_id
        allocated_total += to_decimal(allocation.amount_allocated)

    partner = business_partners_crud.get_partner(db, tenant_id, payment.partner_id)
    unallocated = round2(to_decimal(payment.amount) - allocated_total)
    if unallocated > 0:
        business_partners_crud.add_carried_credit(partner, direction, -unallocated)

    payment.deleted_at = local_now()
    payment.deleted_by = actor_id
    business_partners_crud.recompute_outstanding(db, tenant_id, partner, direction)
    db.commit()

    create_audit_log(db=db, log_entry=AuditLogCreate(
        tenant_id=tenant_id,
        table_name='payments',
        record_id=payment_id,
        changed_by=actor_id,
        action='DELETE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(payment),
    ))

    logger.warning(
        f"Payment {payment_id} deleted by {actor_id} for tenant {tenant_id}; journal entry "
        f"{payment.journal_entry_id} was not reversed and still counts in the ledger and cashbook"
    )
    return payment
