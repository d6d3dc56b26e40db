from sqlalchemy import Column, Integer, String, Date, Numeric, UniqueConstraint, Index
import enum

from database import Base
from models.audit_mixin import TimestampMixin


class JournalEntryType(str, enum.Enum):
    SALES_INVOICE = "sales_invoice"
    PURCHASE_INVOICE = "purchase_invoice"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_MADE = "payment_made"
    MANUAL_INCOME = "manual_income"
    MANUAL_EXPENSE = "manual_expense"
    WAGES = "wages"
    OPENING_BALANCE = "opening_balance"
    ADJUSTMENT = "adjustment"


class ReferenceType(str, enum.Enum):
    SALES_ORDER = "SalesOrder"
    PURCHASE_ORDER = "PurchaseOrder"
    DIRECT_SALE = "DirectSale"
    DIRECT_PURCHASE = "DirectPurchase"
    PAYMENT = "Payment"
    MANUAL = "Manual"


class JournalEntry(Base, TimestampMixin):
    """A posted double-entry record. Never updated or deleted once written."""
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    sequence_number = Column(Integer, nullable=False)  # Tenant-specific sequential number
    entry_date = Column(Date, nullable=False)
    entry_type = Column(String(30), nullable=False)
    reference_type = Column(String(30), nullable=True)
    reference_id = Column(Integer, nullable=True)
    description = Column(String, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'sequence_number', name='_tenant_journal_sequence_uc'),
        Index('ix_journal_entries_tenant_date', 'tenant_id', 'entry_date'),
        Index('ix_journal_entries_reference', 'tenant_id', 'reference_type', 'reference_id'),
    )
