# src/lignum/services/members.py
"""Board membership changes and their realtime side effects."""

from __future__ import annotations

import logging

from lignum.db.gateway import transaction
from lignum.models import Board, BoardMember, NotificationType, User
from lignum.schemas.events import KickedFromBoard, MemberAdded, MemberRemoved
from lignum.schemas.user import MemberSummary
from lignum.services.access import ensure_board_access
from lignum.services.context import MutationContext
from lignum.services.errors import ForbiddenError, NotFoundError, ValidationError
from lignum.services.lookups import get_or_404, reload
from lignum.services.notifications import add_notification, board_link, push_notifications

logger = logging.getLogger(__name__)


async def add_member(ctx: MutationContext, board_id: int, user_id: int) -> MemberSummary:
    """Add ``user_id`` to the board and send them an invite.

    Any member may invite. Adding the owner or an existing member changes
    nothing and emits nothing.
    """
    db = ctx.db
    async with ctx.locks.for_board(board_id):
        board = ensure_board_access(db, board_id, ctx.actor_id)
        user = get_or_404(db, User, user_id, "User")
        summary = MemberSummary.model_validate(user)
        if user.id == board.owner_id or db.get(BoardMember, (board_id, user.id)):
            return summary

        with transaction(db, ctx.actor_id):
            db.add(BoardMember(board_id=board_id, user_id=user.id))
            notification = add_notification(
                db,
                user.id,
                NotificationType.INVITE,
                f"You were added to the board '{board.title}'",
                board_link(board_id),
            )

        logger.info("User %s added to board %s by %s", user.id, board_id, ctx.actor_id)
        await ctx.broadcaster.emit_to_board(
            board_id,
            MemberAdded(user_id=user.id, name=user.name, avatar=user.avatar),
        )
        await push_notifications(ctx.broadcaster, [notification])
    return summary


async def remove_member(ctx: MutationContext, board_id: int, user_id: int) -> None:
    """Remove a member from a board and cut off their live connections.

    The owner may remove anyone else; a member may remove only themself.
    The owner can never be removed. Removing a non-member is a no-op.
    """
    db = ctx.db
    get_or_404(db, Board, board_id, "Board")

    async with ctx.locks.for_board(board_id):
        board = reload(db, Board, board_id)
        if board is None:
            raise NotFoundError("Board not found")
        acting_as_owner = ctx.actor_id == board.owner_id
        if not acting_as_owner and ctx.actor_id != user_id:
            raise ForbiddenError("Only the board owner can remove other members")
        if user_id == board.owner_id:
            raise ValidationError("The board owner cannot be removed")

        membership = db.get(BoardMember, (board_id, user_id), populate_existing=True)
        if membership is None:
            return

        notification = None
        with transaction(db, ctx.actor_id):
            db.delete(membership)
            if acting_as_owner:
                notification = add_notification(
                    db,
                    user_id,
                    NotificationType.SYSTEM,
                    f"You were removed from the board '{board.title}'",
                )

        # Must run before the first await so no later board event reaches them.
        ctx.broadcaster.evict_user_from_board(user_id, board_id)
        logger.info("User %s removed from board %s by %s", user_id, board_id, ctx.actor_id)

        await ctx.broadcaster.emit_to_board(board_id, MemberRemoved(user_id=user_id))
        await ctx.broadcaster.emit_to_user(user_id, KickedFromBoard(board_id=board_id))
        if notification is not None:
            await push_notifications(ctx.broadcaster, [notification])
