"""Fetch-or-raise helpers and owning-board resolution."""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from lignum.db.session import Base
from lignum.models import BoardColumn, Card
from lignum.services.errors import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


def get_or_404(db: Session, model: type[ModelT], ident: object, what: str) -> ModelT:
    instance = db.get(model, ident)
    if instance is None:
        raise NotFoundError(f"{what} not found")
    return instance


def reload(db: Session, model: type[ModelT], ident: object) -> ModelT | None:
    """Re-read a row from the database, bypassing the identity map.

    Handlers call this after acquiring the board lock, since the row may have
    changed or vanished while they waited.
    """
    return db.get(model, ident, populate_existing=True)


def board_id_for_column(db: Session, column_id: int) -> int:
    return get_or_404(db, BoardColumn, column_id, "Column").board_id


def board_id_for_card(db: Session, card: Card) -> int:
    return board_id_for_column(db, card.column_id)
