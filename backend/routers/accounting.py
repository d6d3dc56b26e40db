from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from crud import manual_entries as manual_entries_crud
from exceptions import ConcurrencyError
from schemas.accounting import ManualEntryCreate, WagesCreate
from schemas.journal_entry import PostedJournalEntry
from utils.tenancy import get_tenant_id, get_actor_id

router = APIRouter(prefix="/accounting", tags=["Accounting"])
logger = logging.getLogger("accounting")

@router.post("/manual-entry", response_model=PostedJournalEntry, status_code=status.HTTP_201_CREATED)
def create_manual_entry(
    entry: ManualEntryCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    """Record other income or an other expense paid from cash or bank."""
    try:
        db_entry, db_lines = manual_entries_crud.record_manual_entry(
            db,
            tenant_id=tenant_id,
            entry_date=entry.entry_date,
            kind=entry.type,
            amount=entry.amount,
            payment_mode=entry.payment_mode,
            category=entry.category,
            description=entry.description,
            actor_id=actor_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {"entry": db_entry, "lines": db_lines}

@router.post("/wages", response_model=PostedJournalEntry, status_code=status.HTTP_201_CREATED)
def create_wages_entry(
    wages: WagesCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    try:
        db_entry, db_lines = manual_entries_crud.record_wages(
            db,
            tenant_id=tenant_id,
            entry_date=wages.entry_date,
            total_wages=wages.total_wages,
            description=wages.description,
            actor_id=actor_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {"entry": db_entry, "lines": db_lines}
