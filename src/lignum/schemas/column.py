# src/lignum/schemas/column.py
"""Column-related Pydantic schemas."""

from __future__ import annotations

from pydantic import Field

from .card import CardResponse
from .common import CamelModel


class ColumnCreate(CamelModel):
    """Schema for appending a column to a board."""

    board_id: int
    title: str = Field(min_length=1)
    hex_color: str | None = None


class ColumnUpdate(CamelModel):
    """Partial update of a column's presentation fields."""

    title: str | None = Field(default=None, min_length=1)
    hex_color: str | None = None


class ColumnMove(CamelModel):
    """Target position for a column inside its board."""

    new_position: int = Field(ge=0)


class ColumnResponse(CamelModel):
    """Canonical column representation."""

    id: int
    board_id: int
    title: str
    hex_color: str | None
    order_index: int


class ColumnPosition(CamelModel):
    """Column id paired with its index after a reorder."""

    id: int
    order_index: int


class ColumnWithCards(ColumnResponse):
    """Column together with its cards in rank order."""

    cards: list[CardResponse] = Field(default_factory=list)
