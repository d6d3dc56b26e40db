"""
Invoice-like records that can be paid: sales orders, direct sales, purchase
orders and direct purchases.

The payment engine only needs total / paid / due / status, the party and the
transaction date; OBLIGATION_KINDS maps each table onto those.
"""

from decimal import Decimal
from typing import List, NamedTuple, Tuple

from sqlalchemy.orm import Session

from exceptions import ObligationNotFoundError
from models.direct_purchases import DirectPurchase
from models.direct_sales import DirectSale
from models.journal_entry import ReferenceType
from models.payment_tracking import PaymentStatus
from models.payments import PaymentDirection
from models.purchase_orders import PurchaseOrder
from models.sales_orders import SalesOrder
from utils.payment_calculations import calculate_amount_due, calculate_payment_status, round2, to_decimal

OPEN_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PARTIAL)


class ObligationKind(NamedTuple):
    name: str
    model: type
    party_column: str
    date_column: str
    number_column: str
    direction: PaymentDirection
    reference_type: ReferenceType
    label: str


OBLIGATION_KINDS = {
    "sales_order": ObligationKind("sales_order", SalesOrder, "customer_id", "order_date", "so_number",
                                  PaymentDirection.RECEIVED, ReferenceType.SALES_ORDER, "Sales Order"),
    "direct_sale": ObligationKind("direct_sale", DirectSale, "customer_id", "sale_date", "sale_number",
                                  PaymentDirection.RECEIVED, ReferenceType.DIRECT_SALE, "Direct Sale"),
    "purchase_order": ObligationKind("purchase_order", PurchaseOrder, "vendor_id", "order_date", "po_number",
                                     PaymentDirection.MADE, ReferenceType.PURCHASE_ORDER, "Purchase Order"),
    "direct_purchase": ObligationKind("direct_purchase", DirectPurchase, "vendor_id", "purchase_date", "purchase_number",
                                      PaymentDirection.MADE, ReferenceType.DIRECT_PURCHASE, "Direct Purchase"),
}


def get_kind(obligation_type: str) -> ObligationKind:
    kind = OBLIGATION_KINDS.get(obligation_type)
    if kind is None:
        raise ValueError(f"Unknown obligation type '{obligation_type}'. Expected one of {sorted(OBLIGATION_KINDS)}")
    return kind


def kinds_for_direction(direction: PaymentDirection) -> List[ObligationKind]:
    direction = PaymentDirection(direction)
    return [kind for kind in OBLIGATION_KINDS.values() if kind.direction == direction]


def refresh_payment_state(obligation):
    """Derive amount_due and payment_status from total_amount and amount_paid."""
    obligation.amount_due = calculate_amount_due(obligation.total_amount, obligation.amount_paid)
    obligation.payment_status = calculate_payment_status(obligation.amount_paid, obligation.total_amount)
    return obligation


def get_obligation(db: Session, tenant_id: str, obligation_type: str, obligation_id: int):
    kind = get_kind(obligation_type)
    obligation = db.query(kind.model).filter(
        kind.model.id == obligation_id,
        kind.model.tenant_id == tenant_id
    ).first()
    if obligation is None:
        raise ObligationNotFoundError(obligation_type, obligation_id)
    return obligation


def get_outstanding_obligations(db: Session, tenant_id: str, partner_id: int, direction: PaymentDirection) -> List[Tuple[ObligationKind, object]]:
    """
    Pending and partial obligations of a party across both kinds for the direction,
    oldest first. Ties keep fetch order.
    """
    merged = []
    for kind in kinds_for_direction(direction):
        model = kind.model
        rows = db.query(model).filter(
            model.tenant_id == tenant_id,
            getattr(model, kind.party_column) == partner_id,
            model.payment_status.in_(OPEN_STATUSES)
        ).order_by(model.id).all()
        merged.extend((kind, row) for row in rows)

    return sorted(merged, key=lambda item: getattr(item[1], item[0].date_column))


def sum_outstanding(db: Session, tenant_id: str, partner_id: int, direction: PaymentDirection) -> Decimal:
    total = Decimal("0")
    for _, obligation in get_outstanding_obligations(db, tenant_id, partner_id, direction):
        total += to_decimal(obligation.amount_due)
    return round2(total)


def to_summary(kind: ObligationKind, obligation) -> dict:
    return {
        "obligation_type": kind.name,
        "id": obligation.id,
        "number": getattr(obligation, kind.number_column),
        "partner_id": getattr(obligation, kind.party_column),
        "transaction_date": getattr(obligation, kind.date_column),
        "total_amount": obligation.total_amount,
        "amount_paid": obligation.amount_paid,
        "amount_due": obligation.amount_due,
        "payment_status": obligation.payment_status,
        "payment_type": obligation.payment_type,
    }
