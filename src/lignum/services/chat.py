# src/lignum/services/chat.py
"""Board chat with mention notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from lignum.db.gateway import transaction
from lignum.models import Board, ChatMessage, Notification, NotificationType, User
from lignum.schemas.chat import ChatMessageCreate, ChatMessageResponse
from lignum.schemas.events import ChatMessagePosted, ChatMessageUpdated
from lignum.services.access import ensure_board_access, is_board_member
from lignum.services.context import MutationContext
from lignum.services.errors import NotFoundError
from lignum.services.lookups import get_or_404, reload
from lignum.services.notifications import add_notification, board_link, push_notifications
from lignum.services.payloads import chat_payload, refreshed


def list_messages(db: Session, user_id: int, board_id: int) -> list[ChatMessageResponse]:
    ensure_board_access(db, board_id, user_id)
    messages = (
        db.query(ChatMessage)
        .filter(ChatMessage.board_id == board_id)
        .order_by(ChatMessage.created_at, ChatMessage.id)
        .all()
    )
    return [chat_payload(message) for message in messages]


def _mentioned_members(db: Session, board: Board, author_id: int, user_ids: list[int]) -> list[int]:
    """Mentioned users that can see the board, without the author or repeats."""
    return [
        uid
        for uid in dict.fromkeys(user_ids)
        if uid != author_id and is_board_member(db, board, uid)
    ]


async def post_message(
    ctx: MutationContext, board_id: int, data: ChatMessageCreate
) -> ChatMessageResponse:
    db = ctx.db
    async with ctx.locks.for_board(board_id):
        board = ensure_board_access(db, board_id, ctx.actor_id)
        author = get_or_404(db, User, ctx.actor_id, "User")
        mentioned = _mentioned_members(db, board, author.id, data.mentioned_user_ids)

        notifications: list[Notification] = []
        with transaction(db, ctx.actor_id):
            message = ChatMessage(board_id=board_id, author_id=author.id, content=data.content)
            db.add(message)
            for uid in mentioned:
                notifications.append(
                    add_notification(
                        db,
                        uid,
                        NotificationType.MENTION,
                        f"{author.name} mentioned you in '{board.title}'",
                        board_link(board_id),
                    )
                )

        payload = chat_payload(refreshed(db, message))
        await ctx.broadcaster.emit_to_board(
            board_id, ChatMessagePosted.model_validate(payload.model_dump())
        )
        await push_notifications(ctx.broadcaster, notifications)
    return payload


async def toggle_pin(ctx: MutationContext, message_id: int) -> ChatMessageResponse:
    db = ctx.db
    board_id = get_or_404(db, ChatMessage, message_id, "Message").board_id

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        message = reload(db, ChatMessage, message_id)
        if message is None:
            raise NotFoundError("Message not found")
        with transaction(db, ctx.actor_id):
            message.pinned = not message.pinned

        payload = chat_payload(refreshed(db, message))
        await ctx.broadcaster.emit_to_board(
            board_id, ChatMessageUpdated.model_validate(payload.model_dump())
        )
    return payload
