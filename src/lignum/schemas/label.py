# src/lignum/schemas/label.py
"""Label-related Pydantic schemas."""

from typing import Literal

from pydantic import Field

from .common import CamelModel


class LabelCreate(CamelModel):
    """Schema for creating a label on a board."""

    board_id: int
    title: str = Field(default="", max_length=50)
    color: str = Field(min_length=1)


class LabelUpdate(CamelModel):
    """Partial update of a label's title or colour."""

    title: str | None = Field(default=None, max_length=50)
    color: str | None = Field(default=None, min_length=1)


class LabelToggle(CamelModel):
    """Attach the label to the card, or detach it when already attached."""

    card_id: int
    label_id: int


class LabelResponse(CamelModel):
    """Full label; enough for a client to render it with no prior knowledge."""

    id: int
    board_id: int
    title: str
    color: str


class LabelToggleResponse(CamelModel):
    """Outcome of a toggle call."""

    action: Literal["added", "removed"]
    label: LabelResponse | None = None
