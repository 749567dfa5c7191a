# src/lignum/services/cards.py
"""Card mutations: create, partial update, move and delete."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import func

from lignum.db.gateway import transaction
from lignum.db.time import utcnow
from lignum.models import BoardColumn, Card
from lignum.schemas.card import (
    CardComment,
    CardCreate,
    CardMove,
    CardRank,
    CardResponse,
    CardUpdate,
    ChecklistItem,
)
from lignum.schemas.events import (
    CardCreated,
    CardDeleted,
    CardMoved,
    CardUpdated,
    ColumnRebalanced,
)
from lignum.services.access import ensure_board_access
from lignum.services.context import MutationContext
from lignum.services.errors import NotFoundError, ValidationError
from lignum.services.lookups import board_id_for_card, get_or_404, reload
from lignum.services.patch import Cleared, Patch, SetTo, fields_from_model
from lignum.services.payloads import card_payload, ordered_cards, refreshed
from lignum.services.ranking import compute_rank, needs_rebalance, spread_ranks

logger = logging.getLogger(__name__)

# Fields that may be reset to null.
NULLABLE_FIELDS = ("description", "due_date", "assignee", "hex_color")
# Fields that must always hold a value.
REQUIRED_FIELDS = ("title", "priority", "completed")


async def create_card(ctx: MutationContext, data: CardCreate) -> CardResponse:
    """Append a new card after the last card of its column."""
    db = ctx.db
    column = get_or_404(db, BoardColumn, data.column_id, "Column")
    board_id = column.board_id

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        if reload(db, BoardColumn, column.id) is None:
            raise NotFoundError("Column not found")
        with transaction(db, ctx.actor_id):
            last_rank = (
                db.query(func.max(Card.rank_position))
                .filter(Card.column_id == column.id)
                .scalar()
            )
            card = Card(
                column_id=column.id,
                title=data.title,
                description=data.description,
                priority=data.priority,
                rank_position=compute_rank(last_rank, None),
                checklist=[],
                comments=[],
            )
            db.add(card)
            db.flush()

        payload = card_payload(db, refreshed(db, card))
        await ctx.broadcaster.emit_to_board(
            board_id, CardCreated.model_validate(payload.model_dump())
        )
    return payload


def _checklist_value(items: list[ChecklistItem]) -> list[dict[str, Any]]:
    stored = []
    for item in items:
        if not item.id:
            item = item.model_copy(update={"id": uuid.uuid4().hex})
        stored.append(item.model_dump(mode="json", by_alias=True))
    return stored


def _comments_value(items: list[CardComment], actor_id: int) -> list[dict[str, Any]]:
    stored = []
    for item in items:
        update: dict[str, Any] = {}
        if not item.id:
            update["id"] = uuid.uuid4().hex
        if item.author_id is None:
            update["author_id"] = actor_id
        if item.created_at is None:
            update["created_at"] = utcnow()
        if update:
            item = item.model_copy(update=update)
        stored.append(item.model_dump(mode="json", by_alias=True))
    return stored


def apply_card_patch(card: Card, patch: dict[str, Patch], actor_id: int) -> None:
    """Apply tagged field values to ``card``.

    Raises:
        ValidationError: If a required field is cleared.
    """
    for name in REQUIRED_FIELDS:
        value = patch[name]
        if isinstance(value, Cleared):
            raise ValidationError(f"{name} cannot be cleared")
        if isinstance(value, SetTo):
            setattr(card, name, value.value)

    for name in NULLABLE_FIELDS:
        value = patch[name]
        if isinstance(value, Cleared):
            setattr(card, name, None)
        elif isinstance(value, SetTo):
            setattr(card, name, value.value)

    checklist = patch["checklist"]
    if isinstance(checklist, Cleared):
        card.checklist = []
    elif isinstance(checklist, SetTo):
        card.checklist = _checklist_value(checklist.value)

    comments = patch["comments"]
    if isinstance(comments, Cleared):
        card.comments = []
    elif isinstance(comments, SetTo):
        card.comments = _comments_value(comments.value, actor_id)


async def update_card(ctx: MutationContext, card_id: int, data: CardUpdate) -> CardResponse:
    db = ctx.db
    board_id = board_id_for_card(db, get_or_404(db, Card, card_id, "Card"))
    patch = fields_from_model(data)

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        card = reload(db, Card, card_id)
        if card is None:
            raise NotFoundError("Card not found")
        with transaction(db, ctx.actor_id):
            apply_card_patch(card, patch, ctx.actor_id)

        payload = card_payload(db, refreshed(db, card))
        await ctx.broadcaster.emit_to_board(
            board_id, CardUpdated.model_validate(payload.model_dump())
        )
    return payload


def _neighbours(siblings: list[Card], data: CardMove) -> tuple[Card | None, Card | None]:
    """Resolve the cards the moved card should land between.

    ``siblings`` is the destination column in order, without the moved card.
    A single given neighbour is completed with its actual sibling. When a
    concurrent move has landed between the two given neighbours, the card
    goes directly after ``prev_card_id``.
    """
    positions = {card.id: index for index, card in enumerate(siblings)}

    for neighbour_id in (data.prev_card_id, data.next_card_id):
        if neighbour_id is not None and neighbour_id not in positions:
            raise ValidationError(
                f"Card {neighbour_id} is not in the destination column"
            )

    if data.prev_card_id is not None:
        prev_index = positions[data.prev_card_id]
        if data.next_card_id is not None and positions[data.next_card_id] <= prev_index:
            raise ValidationError("Previous card must come before the next card")
        prev = siblings[prev_index]
        following = siblings[prev_index + 1] if prev_index + 1 < len(siblings) else None
        return prev, following

    if data.next_card_id is not None:
        next_index = positions[data.next_card_id]
        preceding = siblings[next_index - 1] if next_index > 0 else None
        return preceding, siblings[next_index]

    return (siblings[-1] if siblings else None), None


def _rebalance(siblings: list[Card]) -> list[CardRank]:
    for card, rank in zip(siblings, spread_ranks(len(siblings))):
        card.rank_position = rank
    return [CardRank(card_id=card.id, rank_position=card.rank_position) for card in siblings]


async def move_card(ctx: MutationContext, card_id: int, data: CardMove) -> CardResponse:
    """Move a card to another position, possibly in another column of the board."""
    db = ctx.db
    board_id = board_id_for_card(db, get_or_404(db, Card, card_id, "Card"))
    destination = get_or_404(db, BoardColumn, data.new_column_id, "Destination column")
    if destination.board_id != board_id:
        raise ValidationError("Cards can only move between columns of the same board")

    rebalanced: list[CardRank] | None = None
    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        card = reload(db, Card, card_id)
        if card is None:
            raise NotFoundError("Card not found")
        old_column_id = card.column_id

        with transaction(db, ctx.actor_id):
            has_neighbours = data.prev_card_id is not None or data.next_card_id is not None
            if data.new_rank_position is not None and not has_neighbours:
                rank = data.new_rank_position
            else:
                siblings = [c for c in ordered_cards(db, destination.id) if c.id != card.id]
                prev, following = _neighbours(siblings, data)
                prev_rank = prev.rank_position if prev is not None else None
                next_rank = following.rank_position if following is not None else None
                if needs_rebalance(prev_rank, next_rank):
                    rebalanced = _rebalance(siblings)
                    prev_rank = prev.rank_position if prev is not None else None
                    next_rank = following.rank_position if following is not None else None
                    logger.info(
                        "Rebalanced %d card(s) in column %s", len(siblings), destination.id
                    )
                rank = compute_rank(prev_rank, next_rank)
            card.column_id = destination.id
            card.rank_position = rank

        if rebalanced is not None:
            await ctx.broadcaster.emit_to_board(
                board_id,
                ColumnRebalanced(column_id=destination.id, cards=rebalanced),
            )
        await ctx.broadcaster.emit_to_board(
            board_id,
            CardMoved(
                card_id=card.id,
                old_column_id=old_column_id,
                new_column_id=destination.id,
                new_rank_position=card.rank_position,
            ),
        )
        payload = card_payload(db, refreshed(db, card))
    return payload


async def delete_card(ctx: MutationContext, card_id: int) -> None:
    """Delete a card; deleting a card that is already gone is a no-op."""
    db = ctx.db
    card = db.get(Card, card_id)
    if card is None:
        return
    board_id = board_id_for_card(db, card)

    async with ctx.locks.for_board(board_id):
        card = reload(db, Card, card_id)
        if card is None:
            return
        ensure_board_access(db, board_id, ctx.actor_id)
        column_id = card.column_id
        with transaction(db, ctx.actor_id):
            db.delete(card)

        await ctx.broadcaster.emit_to_board(
            board_id, CardDeleted(card_id=card_id, column_id=column_id)
        )
