# src/lignum/models/__init__.py
"""SQLAlchemy models for the Lignum board service."""

from .attachment import Attachment
from .board import Board, BoardMember
from .card import Card, CardLabel, CardPriority
from .chat import ChatMessage
from .column import BoardColumn
from .label import Label
from .notification import Notification, NotificationType
from .user import User

__all__ = [
    "Attachment",
    "Board", "BoardMember",
    "BoardColumn",
    "Card", "CardLabel", "CardPriority",
    "ChatMessage",
    "Label",
    "Notification", "NotificationType",
    "User",
]
