# src/lignum/schemas/chat.py
"""Chat message schemas."""

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class ChatMessageCreate(CamelModel):
    """Schema for posting a chat message."""

    content: str = Field(min_length=1)
    mentioned_user_ids: list[int] = Field(default_factory=list)


class ChatMessageResponse(CamelModel):
    """Chat message including the author's display fields."""

    id: int
    board_id: int
    author_id: int
    author_name: str
    author_avatar: str | None
    content: str
    pinned: bool
    created_at: datetime
