from sqlalchemy import Column, DateTime, String
from datetime import datetime
import pytz

from config import APP_TIMEZONE


def local_now():
    return datetime.now(pytz.timezone(APP_TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    This is the minimal mixin used for most models. It does NOT include soft-delete
    columns; ledger rows are immutable or updated in place.
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=local_now)
    updated_at = Column(DateTime(timezone=True), onupdate=local_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Mixin for soft-delete columns (deleted_at, deleted_by).

    Only applied to payments: a deleted payment must stay readable for
    reconciliation because its journal entry is never reversed.
    """
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)


class AuditMixin(TimestampMixin, SoftDeleteMixin):
    """Timestamps + soft-delete."""
    pass
