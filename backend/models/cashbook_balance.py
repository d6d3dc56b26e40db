from sqlalchemy import Column, Integer, String, Date, Numeric, Boolean, UniqueConstraint

from database import Base
from models.audit_mixin import TimestampMixin


class CashbookBalance(Base, TimestampMixin):
    """Opening/closing cash position of one tenant on one day.

    closing_balance = opening_balance + total_income - total_expense
    """
    __tablename__ = "cashbook_balances"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    balance_date = Column(Date, nullable=False, index=True)
    opening_balance = Column(Numeric(12, 2), nullable=False, default=0)
    closing_balance = Column(Numeric(12, 2), nullable=False, default=0)
    total_income = Column(Numeric(12, 2), nullable=False, default=0)
    total_expense = Column(Numeric(12, 2), nullable=False, default=0)
    is_edited = Column(Boolean, nullable=False, default=False)
    edited_by = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'balance_date', name='_tenant_cashbook_date_uc'),
    )
