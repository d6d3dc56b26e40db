import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from crud.obligations import sum_outstanding
from exceptions import PartyNotFoundError
from models.business_partners import BusinessPartner
from models.payments import PaymentDirection
from schemas.business_partners import BusinessPartnerCreate
from utils.payment_calculations import round2, to_decimal

logger = logging.getLogger(__name__)

def get_partner(db: Session, tenant_id: str, partner_id: int) -> BusinessPartner:
    partner = db.query(BusinessPartner).filter(
        BusinessPartner.id == partner_id,
        BusinessPartner.tenant_id == tenant_id
    ).first()
    if partner is None:
        raise PartyNotFoundError(partner_id)
    return partner

def create_partner(db: Session, partner: BusinessPartnerCreate, tenant_id: str, actor_id: str = None) -> BusinessPartner:
    existing = db.query(BusinessPartner).filter(
        BusinessPartner.name == partner.name,
        BusinessPartner.tenant_id == tenant_id
    ).first()
    if existing:
        raise ValueError("Business partner with this name already exists")

    db_partner = BusinessPartner(**partner.model_dump(), tenant_id=tenant_id, created_by=actor_id)
    db.add(db_partner)
    db.commit()
    db.refresh(db_partner)
    logger.info(f"Business partner '{db_partner.name}' created by user {actor_id} for tenant {tenant_id}")
    return db_partner

def recompute_outstanding(db: Session, tenant_id: str, partner: BusinessPartner, direction: PaymentDirection) -> Decimal:
    """
    Re-sum amount_due over every open obligation of the partner and store it.

    Always a full recomputation, never an incremental adjustment, so the cached
    total cannot drift from the invoices. Does not commit.
    """
    db.flush()
    outstanding = sum_outstanding(db, tenant_id, partner.id, direction)
    if PaymentDirection(direction) == PaymentDirection.RECEIVED:
        partner.current_receivable = outstanding
    else:
        partner.current_payable = outstanding
    return outstanding

def add_carried_credit(partner: BusinessPartner, direction: PaymentDirection, amount) -> Decimal:
    """Carry unapplied money forward (negative amounts give it back, floored at zero)."""
    if PaymentDirection(direction) == PaymentDirection.RECEIVED:
        partner.overpaid_amount = round2(max(Decimal("0"), to_decimal(partner.overpaid_amount) + to_decimal(amount)))
        return partner.overpaid_amount
    partner.advance_paid_amount = round2(max(Decimal("0"), to_decimal(partner.advance_paid_amount) + to_decimal(amount)))
    return partner.advance_paid_amount
