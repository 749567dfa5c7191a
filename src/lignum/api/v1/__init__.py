# src/lignum/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    attachments_router,
    boards_router,
    cards_router,
    chat_router,
    columns_router,
    labels_router,
    notifications_router,
    realtime_router,
    users_router,
)

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
