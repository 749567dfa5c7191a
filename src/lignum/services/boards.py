# src/lignum/services/boards.py
"""Board lifecycle: creation with default columns, listing, snapshots, deletion."""

from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from lignum.core.settings import settings
from lignum.db.gateway import transaction
from lignum.models import Board, BoardColumn, BoardMember, Notification, NotificationType, User
from lignum.schemas.board import BoardCreate, BoardSnapshot, BoardSummary
from lignum.schemas.events import BoardDeleted
from lignum.services.access import ensure_board_access
from lignum.services.context import MutationContext
from lignum.services.errors import ForbiddenError, NotFoundError
from lignum.services.lookups import reload
from lignum.services.notifications import add_notification, board_link, push_notifications
from lignum.services.payloads import board_snapshot, board_summary, refreshed

logger = logging.getLogger(__name__)


async def create_board(ctx: MutationContext, data: BoardCreate) -> BoardSnapshot:
    """Create a board owned by the caller.

    The board starts with the configured default columns. Every listed
    member is added and receives an invite notification.
    """
    db = ctx.db
    member_ids = [uid for uid in dict.fromkeys(data.members) if uid != ctx.actor_id]
    for uid in member_ids:
        if db.get(User, uid) is None:
            raise NotFoundError(f"User {uid} not found")

    notifications: list[Notification] = []
    with transaction(db, ctx.actor_id):
        board = Board(
            title=data.title,
            owner_id=ctx.actor_id,
            background_color=data.background_color,
        )
        db.add(board)
        db.flush()

        for index, title in enumerate(settings.default_columns):
            db.add(BoardColumn(board_id=board.id, title=title, order_index=index))

        for uid in member_ids:
            db.add(BoardMember(board_id=board.id, user_id=uid))
            notifications.append(
                add_notification(
                    db,
                    uid,
                    NotificationType.INVITE,
                    f"You were invited to the board '{board.title}'",
                    board_link(board.id),
                )
            )

    logger.info("Board %s created by user %s", board.id, ctx.actor_id)
    await push_notifications(ctx.broadcaster, notifications)
    return board_snapshot(db, refreshed(db, board))


def list_boards(db: Session, user_id: int) -> list[BoardSummary]:
    """Boards the user owns or is a member of."""
    member_of = db.query(BoardMember.board_id).filter(BoardMember.user_id == user_id)
    boards = (
        db.query(Board)
        .filter(or_(Board.owner_id == user_id, Board.id.in_(member_of)))
        .order_by(Board.created_at.desc(), Board.id.desc())
        .all()
    )
    return [board_summary(db, board) for board in boards]


def get_board(db: Session, user_id: int, board_id: int) -> BoardSnapshot:
    board = ensure_board_access(db, board_id, user_id)
    return board_snapshot(db, board)


async def delete_board(ctx: MutationContext, board_id: int) -> None:
    """Delete a board and everything on it; only the owner may do this."""
    db = ctx.db
    if db.get(Board, board_id) is None:
        return

    async with ctx.locks.for_board(board_id):
        board = reload(db, Board, board_id)
        if board is None:
            return
        if board.owner_id != ctx.actor_id:
            raise ForbiddenError("Only the board owner can delete the board")
        with transaction(db, ctx.actor_id):
            db.delete(board)

        logger.info("Board %s deleted by user %s", board_id, ctx.actor_id)
        await ctx.broadcaster.emit_to_board(board_id, BoardDeleted(board_id=board_id))
        ctx.broadcaster.close_board_room(board_id)
    ctx.locks.discard(board_id)
