"""
Per-tenant sequential numbers (journal entries, order numbers).

Numbers are assigned as max + 1 and guarded by a (tenant_id, number) unique
constraint. Two concurrent inserts can read the same max; the loser hits an
IntegrityError, rolls back and tries again with a fresh read.
"""

import logging
import time

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from exceptions import ConcurrencyError

logger = logging.getLogger(__name__)


def next_sequence_value(db: Session, model, number_column: str, tenant_id: str) -> int:
    column = getattr(model, number_column)
    last_number = db.query(func.max(column)).filter(model.tenant_id == tenant_id).scalar() or 0
    return last_number + 1


def insert_with_sequence(db: Session, model, number_column: str, tenant_id: str, build, max_attempts: int = None, retry_delay: float = None):
    """
    Build and flush a row numbered max + 1 for the tenant, retrying on collisions.

    `build` receives the candidate number and returns the unsaved model instance.
    A collision rolls the whole session back, so callers must have committed any
    earlier work they want to keep. Raises ConcurrencyError after `max_attempts`.
    """
    max_attempts = max_attempts or config.SEQUENCE_MAX_ATTEMPTS
    retry_delay = config.SEQUENCE_RETRY_DELAY if retry_delay is None else retry_delay

    for attempt in range(1, max_attempts + 1):
        number = next_sequence_value(db, model, number_column, tenant_id)
        instance = build(number)
        db.add(instance)
        try:
            db.flush()
            return instance
        except IntegrityError:
            db.rollback()
            logger.warning(
                f"{model.__tablename__}.{number_column}={number} already taken for tenant {tenant_id} "
                f"(attempt {attempt}/{max_attempts})"
            )
            if attempt < max_attempts:
                time.sleep(retry_delay)

    raise ConcurrencyError(
        f"Could not assign a unique {number_column} for {model.__tablename__} after {max_attempts} attempts"
    )
