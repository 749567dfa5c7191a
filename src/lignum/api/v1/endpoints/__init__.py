# src/lignum/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .attachments import router as attachments_router
from .boards import router as boards_router
from .cards import router as cards_router
from .chat import router as chat_router
from .columns import router as columns_router
from .labels import router as labels_router
from .notifications import router as notifications_router
from .realtime import router as realtime_router
from .users import router as users_router

__all__ = [
    "boards_router",
    "columns_router",
    "cards_router",
    "labels_router",
    "attachments_router",
    "chat_router",
    "notifications_router",
    "users_router",
    "realtime_router",
]
