from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from models.journal_entry import JournalEntryType
from .journal_line import JournalLineCreate, JournalLine

class JournalEntryCreate(BaseModel):
    """Manual journal entry. Balance is checked by the posting engine, not here."""
    entry_date: date
    entry_type: JournalEntryType = JournalEntryType.ADJUSTMENT
    description: Optional[str] = None
    lines: List[JournalLineCreate]

class JournalEntry(BaseModel):
    id: int
    tenant_id: str
    sequence_number: int
    entry_date: date
    entry_type: str
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    description: Optional[str] = None
    total_amount: Decimal
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PostedJournalEntry(BaseModel):
    entry: JournalEntry
    lines: List[JournalLine] = []
