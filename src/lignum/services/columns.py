# src/lignum/services/columns.py
"""Column queries and mutations.

Column indices within a board are always the dense range ``0..n-1``:
creation appends at ``n``, deletion closes the gap and a move shifts the
contiguous range between the old and new positions.
"""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from lignum.db.gateway import transaction
from lignum.models import BoardColumn
from lignum.schemas.column import (
    ColumnCreate,
    ColumnMove,
    ColumnResponse,
    ColumnUpdate,
    ColumnWithCards,
)
from lignum.schemas.events import ColumnCreated, ColumnDeleted, ColumnMoved, ColumnUpdated
from lignum.services.access import ensure_board_access
from lignum.services.context import MutationContext
from lignum.services.errors import NotFoundError, ValidationError
from lignum.services.lookups import get_or_404, reload
from lignum.services.patch import Cleared, SetTo, fields_from_model
from lignum.services.payloads import (
    column_payload,
    column_positions,
    columns_with_cards,
    ordered_columns,
    refreshed,
)
from lignum.services.ranking import shift_plan

logger = logging.getLogger(__name__)


def list_columns(db: Session, actor_id: int, board_id: int) -> list[ColumnWithCards]:
    ensure_board_access(db, board_id, actor_id)
    return columns_with_cards(db, board_id)


def _column_count(db: Session, board_id: int) -> int:
    return (
        db.query(func.count(BoardColumn.id))
        .filter(BoardColumn.board_id == board_id)
        .scalar()
        or 0
    )


async def create_column(ctx: MutationContext, data: ColumnCreate) -> ColumnResponse:
    db = ctx.db
    async with ctx.locks.for_board(data.board_id):
        ensure_board_access(db, data.board_id, ctx.actor_id)
        with transaction(db, ctx.actor_id):
            column = BoardColumn(
                board_id=data.board_id,
                title=data.title,
                hex_color=data.hex_color,
                order_index=_column_count(db, data.board_id),
            )
            db.add(column)
            db.flush()

        payload = column_payload(refreshed(db, column))
        await ctx.broadcaster.emit_to_board(
            data.board_id, ColumnCreated.model_validate(payload.model_dump())
        )
    return payload


async def update_column(
    ctx: MutationContext, column_id: int, data: ColumnUpdate
) -> ColumnResponse:
    db = ctx.db
    board_id = get_or_404(db, BoardColumn, column_id, "Column").board_id
    patch = fields_from_model(data)
    if isinstance(patch["title"], Cleared):
        raise ValidationError("title cannot be cleared")

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        column = reload(db, BoardColumn, column_id)
        if column is None:
            raise NotFoundError("Column not found")
        with transaction(db, ctx.actor_id):
            if isinstance(patch["title"], SetTo):
                column.title = patch["title"].value
            if isinstance(patch["hex_color"], Cleared):
                column.hex_color = None
            elif isinstance(patch["hex_color"], SetTo):
                column.hex_color = patch["hex_color"].value

        payload = column_payload(refreshed(db, column))
        await ctx.broadcaster.emit_to_board(
            board_id, ColumnUpdated.model_validate(payload.model_dump())
        )
    return payload


async def move_column(
    ctx: MutationContext, column_id: int, data: ColumnMove
) -> list[ColumnResponse]:
    """Move a column to ``data.new_position`` and shift the columns in between.

    Returns:
        Every column of the board in its new order.

    Raises:
        ValidationError: If the target position is outside ``[0, n-1]``.
    """
    db = ctx.db
    board_id = get_or_404(db, BoardColumn, column_id, "Column").board_id

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        column = reload(db, BoardColumn, column_id)
        if column is None:
            raise NotFoundError("Column not found")

        count = _column_count(db, board_id)
        new_index = data.new_position
        if not 0 <= new_index < count:
            raise ValidationError(
                f"Position {new_index} is out of range for {count} column(s)"
            )

        old_index = column.order_index
        if old_index == new_index:
            return [column_payload(c) for c in ordered_columns(db, board_id)]

        plan = shift_plan(old_index, new_index)
        with transaction(db, ctx.actor_id):
            db.query(BoardColumn).filter(
                BoardColumn.board_id == board_id,
                BoardColumn.id != column.id,
                BoardColumn.order_index.between(plan.low, plan.high),
            ).update(
                {BoardColumn.order_index: BoardColumn.order_index + plan.delta},
                synchronize_session="fetch",
            )
            column.order_index = new_index

        columns = ordered_columns(db, board_id)
        await ctx.broadcaster.emit_to_board(
            board_id,
            ColumnMoved(
                column_id=column.id,
                board_id=board_id,
                old_position=old_index,
                new_position=new_index,
                columns=column_positions(db, board_id),
            ),
        )
    return [column_payload(c) for c in columns]


async def delete_column(ctx: MutationContext, column_id: int) -> None:
    """Delete a column with its cards; a missing column is a no-op."""
    db = ctx.db
    column = db.get(BoardColumn, column_id)
    if column is None:
        return
    board_id = column.board_id

    async with ctx.locks.for_board(board_id):
        column = reload(db, BoardColumn, column_id)
        if column is None:
            return
        ensure_board_access(db, board_id, ctx.actor_id)
        removed_index = column.order_index
        with transaction(db, ctx.actor_id):
            db.delete(column)
            db.flush()
            db.query(BoardColumn).filter(
                BoardColumn.board_id == board_id,
                BoardColumn.order_index > removed_index,
            ).update(
                {BoardColumn.order_index: BoardColumn.order_index - 1},
                synchronize_session="fetch",
            )

        logger.debug("Deleted column %s from board %s", column_id, board_id)
        await ctx.broadcaster.emit_to_board(
            board_id, ColumnDeleted(column_id=column_id, board_id=board_id)
        )
