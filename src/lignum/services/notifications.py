# src/lignum/services/notifications.py
"""Personal notifications: creation, listing and read state."""

from __future__ import annotations

from sqlalchemy.orm import Session

from lignum.core.settings import settings
from lignum.db.gateway import transaction
from lignum.models import Notification, NotificationType
from lignum.schemas.events import NewNotification
from lignum.schemas.notification import NotificationResponse
from lignum.services.broadcaster import RoomBroadcaster
from lignum.services.errors import NotFoundError


def board_link(board_id: int) -> str:
    return f"/boards/{board_id}"


def add_notification(
    db: Session,
    user_id: int,
    kind: NotificationType,
    content: str,
    resource_link: str | None = None,
) -> Notification:
    """Stage a notification in the current transaction."""
    notification = Notification(
        user_id=user_id,
        type=kind,
        content=content,
        resource_link=resource_link,
        is_read=False,
    )
    db.add(notification)
    return notification


async def push_notifications(
    broadcaster: RoomBroadcaster, notifications: list[Notification]
) -> None:
    """Deliver committed notifications to their users' rooms."""
    for notification in notifications:
        payload = NotificationResponse.model_validate(notification)
        await broadcaster.emit_to_user(
            notification.user_id, NewNotification.model_validate(payload.model_dump())
        )


def list_notifications(db: Session, user_id: int) -> list[NotificationResponse]:
    """Return the caller's most recent notifications, newest first."""
    rows = (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(settings.notification_page_size)
        .all()
    )
    return [NotificationResponse.model_validate(row) for row in rows]


def mark_read(db: Session, user_id: int, notification_id: int) -> NotificationResponse:
    """Mark one of the caller's notifications as read.

    Other users' notifications are reported as missing.
    """
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    with transaction(db, user_id):
        notification.is_read = True
    return NotificationResponse.model_validate(notification)
