from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint, String

from database import Base
from models.audit_mixin import TimestampMixin


class JournalLine(Base, TimestampMixin):
    """One debit or credit row of a journal entry.

    Entry and account are referenced by id only; account_name is a snapshot
    taken at posting time.
    """
    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=False, index=True)
    account_name = Column(String(100), nullable=False)
    debit = Column(Numeric(12, 2), CheckConstraint('debit >= 0'), nullable=False, default=0)
    credit = Column(Numeric(12, 2), CheckConstraint('credit >= 0'), nullable=False, default=0)
    description = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0)',
            name='check_debit_or_credit_exclusive'
        ),
    )
