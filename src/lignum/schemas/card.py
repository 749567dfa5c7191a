# src/lignum/schemas/card.py
"""Card-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, FiniteFloat

from lignum.models.card import CardPriority

from .attachment import AttachmentResponse
from .common import CamelModel
from .label import LabelResponse


class ChecklistItem(CamelModel):
    """One checklist entry; the server assigns ``id`` when it is missing."""

    id: str | None = None
    text: str
    is_checked: bool = False


class CardComment(CamelModel):
    """One comment stored inline on the card."""

    id: str | None = None
    author_id: int | None = None
    content: str
    created_at: datetime | None = None


class CardCreate(CamelModel):
    """Schema for creating a card at the end of a column."""

    column_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    priority: CardPriority = CardPriority.MEDIUM


class CardUpdate(CamelModel):
    """Partial card update.

    Omitted fields stay unchanged; fields sent as ``null`` are cleared. The
    distinction is read from ``model_fields_set``.
    """

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    priority: CardPriority | None = None
    due_date: datetime | None = None
    assignee: str | None = None
    hex_color: str | None = None
    completed: bool | None = None
    checklist: list[ChecklistItem] | None = None
    comments: list[CardComment] | None = None


class CardMove(CamelModel):
    """Move a card into ``new_column_id``.

    Either pass the neighbours the card should land between or the final
    ``new_rank_position``; neighbours take precedence. With neither, the card
    goes to the end.
    """

    new_column_id: int
    new_rank_position: FiniteFloat | None = None
    prev_card_id: int | None = None
    next_card_id: int | None = None


class CardResponse(CamelModel):
    """Canonical card representation used by responses and events."""

    id: int
    column_id: int
    title: str
    description: str | None
    rank_position: float
    priority: CardPriority
    due_date: datetime | None
    assignee: str | None
    hex_color: str | None
    completed: bool
    checklist: list[ChecklistItem]
    comments: list[CardComment]
    labels: list[LabelResponse]
    attachments: list[AttachmentResponse]
    created_at: datetime


class CardRank(CamelModel):
    """Card id with its rank after a column renumbering."""

    card_id: int
    rank_position: float
