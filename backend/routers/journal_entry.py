from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
from schemas.journal_entry import JournalEntry, JournalEntryCreate, PostedJournalEntry
from crud import journal_entry as journal_entry_crud
from exceptions import ConcurrencyError
from models.journal_entry import ReferenceType
from utils.tenancy import get_tenant_id, get_actor_id

router = APIRouter(
    prefix="/journal-entries",
    tags=["Journal Entries"],
)
logger = logging.getLogger("journal_entries")

@router.post("/", response_model=PostedJournalEntry, status_code=status.HTTP_201_CREATED)
def create_journal_entry(
    entry: JournalEntryCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[str] = Depends(get_actor_id)
):
    """
    Post a manual journal entry.
    Debits must equal credits; the posting engine rejects anything else before writing.
    """
    try:
        db_entry, db_lines = journal_entry_crud.post_journal_entry(
            db,
            tenant_id=tenant_id,
            entry_date=entry.entry_date,
            entry_type=entry.entry_type,
            reference_type=ReferenceType.MANUAL,
            reference_id=None,
            description=entry.description,
            lines=[line.model_dump() for line in entry.lines],
            actor_id=actor_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConcurrencyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {"entry": db_entry, "lines": db_lines}


@router.get("/", response_model=List[JournalEntry])
def get_journal_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Retrieve a list of journal entries.
    """
    return journal_entry_crud.get_journal_entries(
        db=db,
        tenant_id=tenant_id,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit
    )

@router.get("/{entry_id}", response_model=PostedJournalEntry)
def get_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """
    Retrieve a single journal entry with its lines.
    """
    db_entry = journal_entry_crud.get_journal_entry(db=db, entry_id=entry_id, tenant_id=tenant_id)
    if db_entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return {"entry": db_entry, "lines": journal_entry_crud.get_lines_for_entry(db, entry_id, tenant_id)}
