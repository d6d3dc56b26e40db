from sqlalchemy import Column, Integer, String, Text, Boolean, UniqueConstraint
import enum

from database import Base
from models.audit_mixin import TimestampMixin


class AccountType(str, enum.Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    INCOME = "income"
    EXPENSE = "expense"
    EQUITY = "equity"


class LedgerAccount(Base, TimestampMixin):
    __tablename__ = "chart_of_accounts"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    account_code = Column(String(20), nullable=False, index=True)
    account_name = Column(String(100), nullable=False)
    account_type = Column(String(20), nullable=False)  # one of AccountType values
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_system_account = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'account_code', name='_tenant_account_code_uc'),
    )
