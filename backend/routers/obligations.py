from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import obligations as obligations_crud
from crud.invoices import create_obligation
from exceptions import ConcurrencyError, RecordNotFoundError
from models.payments import PaymentDirection
from schemas.obligations import Obligation, ObligationCreate
from utils.tenancy import get_tenant_id, get_actor_id

router = APIRouter(prefix="/obligations", tags=["Obligations"])
logger = logging.getLogger("obligations")

@router.get("/outstanding/{partner_id}", response_model=List[Obligation])
def get_outstanding(
    partner_id: int,
    direction: PaymentDirection = PaymentDirection.RECEIVED,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Open invoices of a party in the order a party payment would settle them."""
    return [
        obligations_crud.to_summary(kind, obligation)
        for kind, obligation in obligations_crud.get_outstanding_obligations(db, tenant_id, partner_id, direction)
    ]

@router.post("/{obligation_type}", response_model=Obligation, status_code=status.HTTP_201_CREATED)
def create_obligation_endpoint(
    obligation_type: str,
    obligation: ObligationCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    try:
        kind = obligations_crud.get_kind(obligation_type)
        db_obligation = create_obligation(
            db,
            tenant_id=tenant_id,
            obligation_type=obligation_type,
            partner_id=obligation.partner_id,
            total_amount=obligation.total_amount,
            transaction_date=obligation.transaction_date,
            payment_type=obligation.payment_type,
            notes=obligation.notes,
            actor_id=actor_id,
        )
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return obligations_crud.to_summary(kind, db_obligation)

@router.get("/{obligation_type}/{obligation_id}", response_model=Obligation)
def read_obligation(
    obligation_type: str,
    obligation_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    try:
        kind = obligations_crud.get_kind(obligation_type)
        obligation = obligations_crud.get_obligation(db, tenant_id, obligation_type, obligation_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return obligations_crud.to_summary(kind, obligation)
