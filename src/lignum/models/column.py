"""SQLAlchemy model for board columns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lignum.db.session import Base

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .board import Board
    from .card import Card


class BoardColumn(Base):
    """A list on a board.

    ``order_index`` is dense and 0-based within a board; every write that
    touches it renumbers the affected range in the same transaction.
    """

    __tablename__ = "board_columns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    board_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    hex_color: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    board: Mapped[Board] = relationship("Board", back_populates="columns")
    cards: Mapped[list[Card]] = relationship(
        "Card",
        back_populates="column",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Card.rank_position",
    )
