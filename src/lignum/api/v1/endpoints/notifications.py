# src/lignum/api/v1/endpoints/notifications.py
"""Notification endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from lignum.schemas.notification import NotificationResponse
from lignum.services import notifications as notification_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[NotificationResponse]:
    """Return the caller's latest notifications, newest first."""
    return notification_service.list_notifications(db, current_user.id)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> NotificationResponse:
    return notification_service.mark_read(db, current_user.id, notification_id)
