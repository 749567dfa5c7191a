# src/lignum/schemas/notification.py
"""Notification schemas."""

from datetime import datetime

from lignum.models.notification import NotificationType

from .common import CamelModel


class NotificationResponse(CamelModel):
    """A stored notification row."""

    id: int
    user_id: int
    type: NotificationType
    content: str
    resource_link: str | None
    is_read: bool
    created_at: datetime
