# src/lignum/schemas/events.py
"""Server-to-client realtime events.

Every event is its own Pydantic model with a fixed payload schema and a
class-level ``event`` name. ``frame()`` produces the JSON object written to
the socket: ``{"event": <name>, "data": <camelCase payload>}``.
"""

from __future__ import annotations

from typing import Any, ClassVar

from .attachment import AttachmentResponse
from .card import CardRank, CardResponse
from .chat import ChatMessageResponse
from .column import ColumnPosition, ColumnResponse
from .common import CamelModel
from .label import LabelResponse
from .notification import NotificationResponse


class ServerEvent(CamelModel):
    """Base for every event pushed to connected clients."""

    event: ClassVar[str]

    def frame(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "data": self.model_dump(mode="json", by_alias=True),
        }


# Room lifecycle

class JoinedBoard(ServerEvent):
    event: ClassVar[str] = "joined_board"

    board_id: int


class AccessDenied(ServerEvent):
    event: ClassVar[str] = "access_denied"

    board_id: int | None = None
    reason: str


class KickedFromBoard(ServerEvent):
    event: ClassVar[str] = "kicked_from_board"

    board_id: int


class BoardDeleted(ServerEvent):
    event: ClassVar[str] = "board_deleted"

    board_id: int


class Pong(ServerEvent):
    event: ClassVar[str] = "pong"


class ErrorEvent(ServerEvent):
    event: ClassVar[str] = "error"

    message: str


# Columns

class ColumnCreated(ColumnResponse, ServerEvent):
    event: ClassVar[str] = "column_created"


class ColumnUpdated(ColumnResponse, ServerEvent):
    event: ClassVar[str] = "column_updated"


class ColumnMoved(ServerEvent):
    event: ClassVar[str] = "column_moved"

    column_id: int
    board_id: int
    old_position: int
    new_position: int
    columns: list[ColumnPosition]


class ColumnDeleted(ServerEvent):
    event: ClassVar[str] = "column_deleted"

    column_id: int
    board_id: int


class ColumnRebalanced(ServerEvent):
    event: ClassVar[str] = "column_rebalanced"

    column_id: int
    cards: list[CardRank]


# Cards

class CardCreated(CardResponse, ServerEvent):
    event: ClassVar[str] = "card_created"


class CardUpdated(CardResponse, ServerEvent):
    event: ClassVar[str] = "card_updated"


class CardMoved(ServerEvent):
    event: ClassVar[str] = "card_moved"

    card_id: int
    old_column_id: int
    new_column_id: int
    new_rank_position: float


class CardDeleted(ServerEvent):
    event: ClassVar[str] = "card_deleted"

    card_id: int
    column_id: int


# Labels

class LabelCreated(LabelResponse, ServerEvent):
    event: ClassVar[str] = "label_created"


class LabelUpdated(LabelResponse, ServerEvent):
    event: ClassVar[str] = "label_updated"


class LabelDeleted(ServerEvent):
    event: ClassVar[str] = "label_deleted"

    label_id: int


class CardLabelAdded(ServerEvent):
    event: ClassVar[str] = "card_label_added"

    card_id: int
    label: LabelResponse


class CardLabelRemoved(ServerEvent):
    event: ClassVar[str] = "card_label_removed"

    card_id: int
    label_id: int


# Attachments

class AttachmentAdded(ServerEvent):
    event: ClassVar[str] = "attachment_added"

    card_id: int
    attachment: AttachmentResponse


class AttachmentRemoved(ServerEvent):
    event: ClassVar[str] = "attachment_removed"

    card_id: int
    attachment_id: int


# Membership

class MemberAdded(ServerEvent):
    event: ClassVar[str] = "member_added"

    user_id: int
    name: str
    avatar: str | None = None


class MemberRemoved(ServerEvent):
    event: ClassVar[str] = "member_removed"

    user_id: int


# Chat and notifications

class ChatMessagePosted(ChatMessageResponse, ServerEvent):
    event: ClassVar[str] = "chat_message"


class ChatMessageUpdated(ChatMessageResponse, ServerEvent):
    event: ClassVar[str] = "chat_message_updated"


class NewNotification(NotificationResponse, ServerEvent):
    event: ClassVar[str] = "new_notification"
