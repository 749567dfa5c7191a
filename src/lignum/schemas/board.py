# src/lignum/schemas/board.py
"""Board-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .column import ColumnWithCards
from .common import CamelModel
from .label import LabelResponse
from .user import MemberSummary


class BoardCreate(CamelModel):
    """Schema for creating a board, optionally inviting members."""

    title: str = Field(min_length=1)
    background_color: str = "#1E1E1E"
    members: list[int] = Field(default_factory=list)


class BoardResponse(CamelModel):
    """Board header information."""

    id: int
    title: str
    owner_id: int
    background_color: str
    created_at: datetime


class BoardSummary(BoardResponse):
    """Board entry in the caller's board list."""

    members: list[MemberSummary] = Field(default_factory=list)


class BoardSnapshot(BoardResponse):
    """Full board state a client loads on join or reconnect."""

    columns: list[ColumnWithCards] = Field(default_factory=list)
    labels: list[LabelResponse] = Field(default_factory=list)
    members: list[MemberSummary] = Field(default_factory=list)


class MemberAdd(CamelModel):
    """Schema for adding a user to a board."""

    user_id: int
