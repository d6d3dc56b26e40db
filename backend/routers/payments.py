from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import payments as payments_crud
from exceptions import ConcurrencyError, RecordNotFoundError
from models.payments import PaymentDirection
from schemas.payments import Payment, PaymentResult, PartyPaymentCreate, ObligationPaymentCreate
from utils.tenancy import get_tenant_id, get_actor_id

router = APIRouter(prefix="/payments", tags=["Payments"])
logger = logging.getLogger("payments")

@router.post("/party", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
def create_party_payment(
    payment: PartyPaymentCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    """Record a lump payment from/to a party and spread it over their open invoices, oldest first."""
    try:
        result = payments_crud.allocate_to_party(
            db,
            tenant_id=tenant_id,
            partner_id=payment.partner_id,
            amount=payment.amount,
            payment_mode=payment.payment_mode,
            payment_date=payment.payment_date,
            reference_number=payment.reference_number,
            notes=payment.notes,
            direction=payment.direction,
            actor_id=actor_id,
        )
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if result["warning"]:
        logger.warning(f"Party payment {result['payment'].id} for tenant {tenant_id}: {result['warning']}")
    return result

@router.post("/obligation", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
def create_obligation_payment(
    payment: ObligationPaymentCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    """Record a payment against one specific sale or purchase."""
    try:
        return payments_crud.record_obligation_payment(
            db,
            tenant_id=tenant_id,
            obligation_type=payment.obligation_type,
            obligation_id=payment.obligation_id,
            amount=payment.amount,
            payment_mode=payment.payment_mode,
            payment_date=payment.payment_date,
            reference_number=payment.reference_number,
            notes=payment.notes,
            actor_id=actor_id,
        )
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

@router.get("/failed-journal", response_model=List[Payment])
def get_failed_journal_payments(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Payments whose journal entry failed and still need reconciling."""
    return payments_crud.get_failed_journal_payments(db, tenant_id)

@router.get("/deleted", response_model=List[Payment])
def get_deleted_payments(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    """Deleted payments whose journal entries were left in place."""
    return payments_crud.get_deleted_payments(db, tenant_id)

@router.get("/party/{partner_id}", response_model=List[Payment])
def get_payments_for_party(
    partner_id: int,
    direction: Optional[PaymentDirection] = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return payments_crud.get_payments_for_party(db, tenant_id, partner_id, direction=direction, skip=skip, limit=limit)

@router.get("/{payment_id}", response_model=Payment)
def read_payment(
    payment_id: int,
    include_deleted: bool = False,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Retrieve a single payment by ID."""
    try:
        return payments_crud.get_payment(db, tenant_id, payment_id, include_deleted=include_deleted)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Payment not found")

@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    """
    Soft-delete a payment and restore what it had settled.
    Its journal entry is not reversed; post an adjusting entry by hand.
    """
    try:
        payments_crud.delete_payment(db, tenant_id, payment_id, actor_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Payment not found")
    return None
