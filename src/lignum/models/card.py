"""SQLAlchemy models for cards and their label links."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, Enum, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lignum.db.session import Base
from lignum.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .attachment import Attachment
    from .column import BoardColumn
    from .label import Label


class CardPriority(str, enum.Enum):
    """Closed set of card priorities."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Card(Base):
    """A card inside one column.

    Cards are ordered by ``rank_position`` ascending, ties broken by ``id``.
    Ranks are sparse floats so a move only rewrites the moved card.
    """

    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    column_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("board_columns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rank_position: Mapped[float] = mapped_column(Float, nullable=False)
    priority: Mapped[CardPriority] = mapped_column(
        Enum(
            CardPriority,
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=CardPriority.MEDIUM,
    )
    due_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    assignee: Mapped[str | None] = mapped_column(Text, nullable=True)
    hex_color: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Ordered lists stored inline; always reassigned, never mutated in place.
    checklist: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    comments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)

    column: Mapped[BoardColumn] = relationship("BoardColumn", back_populates="cards")
    labels: Mapped[list[Label]] = relationship(
        "Label",
        secondary="card_labels",
        order_by="Label.id",
        viewonly=True,
    )
    attachments: Mapped[list[Attachment]] = relationship(
        "Attachment",
        back_populates="card",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Attachment.id",
    )
    label_links: Mapped[list[CardLabel]] = relationship(
        "CardLabel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class CardLabel(Base):
    """Join row attaching a label to a card; the pair is the primary key."""

    __tablename__ = "card_labels"

    card_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cards.id", ondelete="CASCADE"),
        primary_key=True,
    )
    label_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("labels.id", ondelete="CASCADE"),
        primary_key=True,
    )
