"""SQLAlchemy models for boards and their membership."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lignum.db.session import Base
from lignum.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .chat import ChatMessage
    from .column import BoardColumn
    from .label import Label


class Board(Base):
    """A kanban board owned by exactly one user."""

    __tablename__ = "boards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # The owner is always authorized and is not repeated in board_members.
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    background_color: Mapped[str] = mapped_column(Text, nullable=False, default="#1E1E1E")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)

    columns: Mapped[list[BoardColumn]] = relationship(
        "BoardColumn",
        back_populates="board",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BoardColumn.order_index",
    )
    labels: Mapped[list[Label]] = relationship(
        "Label",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    messages: Mapped[list[ChatMessage]] = relationship(
        "ChatMessage",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    members: Mapped[list[BoardMember]] = relationship(
        "BoardMember",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class BoardMember(Base):
    """Join table granting a non-owner user access to a board."""

    __tablename__ = "board_members"

    board_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("boards.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    added_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
