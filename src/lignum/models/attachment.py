"""Models describing card attachment metadata."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lignum.db.session import Base
from lignum.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .card import Card


class Attachment(Base):
    """Metadata row for a file attached to a card.

    The bytes themselves are kept by the upload store under ``stored_name``;
    this service never reads them.
    """

    __tablename__ = "attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    card_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    stored_name: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)

    card: Mapped[Card] = relationship("Card", back_populates="attachments")
