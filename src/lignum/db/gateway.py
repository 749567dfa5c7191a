"""Transactional write helper used by every mutation handler."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lignum.services.errors import PersistenceError

logger = logging.getLogger(__name__)

AUDIT_USER_SETTING = "lignum.current_user_id"


def set_audit_context(db: Session, actor_id: int) -> None:
    """Attribute the current transaction's writes to ``actor_id``.

    Only PostgreSQL has transaction-local settings; audit triggers read the
    value with ``current_setting``. Other dialects are left untouched.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(
        text("SELECT set_config(:name, :value, true)"),
        {"name": AUDIT_USER_SETTING, "value": str(actor_id)},
    )


@contextmanager
def transaction(db: Session, actor_id: int | None = None) -> Iterator[Session]:
    """Run the enclosed writes as one transaction.

    Commits when the block exits normally. Any exception rolls the whole
    transaction back; SQLAlchemy errors are logged and re-raised as
    ``PersistenceError`` while domain errors propagate unchanged.
    """
    try:
        if actor_id is not None:
            set_audit_context(db, actor_id)
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Transaction rolled back after database error")
        raise PersistenceError("Could not persist the change") from exc
    except Exception:
        db.rollback()
        raise
