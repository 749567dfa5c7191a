# src/lignum/services/labels.py
"""Board labels and their attachment to cards."""

from __future__ import annotations

from lignum.db.gateway import transaction
from lignum.models import Card, CardLabel, Label
from lignum.schemas.events import (
    CardLabelAdded,
    CardLabelRemoved,
    LabelCreated,
    LabelDeleted,
    LabelUpdated,
)
from lignum.schemas.label import (
    LabelCreate,
    LabelResponse,
    LabelToggle,
    LabelToggleResponse,
    LabelUpdate,
)
from lignum.services.access import ensure_board_access
from lignum.services.context import MutationContext
from lignum.services.errors import NotFoundError, ValidationError
from lignum.services.lookups import board_id_for_card, get_or_404, reload
from lignum.services.patch import Cleared, SetTo, fields_from_model
from lignum.services.payloads import label_payload, refreshed


async def create_label(ctx: MutationContext, data: LabelCreate) -> LabelResponse:
    db = ctx.db
    async with ctx.locks.for_board(data.board_id):
        ensure_board_access(db, data.board_id, ctx.actor_id)
        with transaction(db, ctx.actor_id):
            label = Label(board_id=data.board_id, title=data.title, color=data.color)
            db.add(label)
            db.flush()

        payload = label_payload(refreshed(db, label))
        await ctx.broadcaster.emit_to_board(
            data.board_id, LabelCreated.model_validate(payload.model_dump())
        )
    return payload


async def update_label(ctx: MutationContext, label_id: int, data: LabelUpdate) -> LabelResponse:
    db = ctx.db
    board_id = get_or_404(db, Label, label_id, "Label").board_id
    patch = fields_from_model(data)
    if isinstance(patch["color"], Cleared):
        raise ValidationError("color cannot be cleared")

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        label = reload(db, Label, label_id)
        if label is None:
            raise NotFoundError("Label not found")
        with transaction(db, ctx.actor_id):
            if isinstance(patch["title"], Cleared):
                label.title = ""
            elif isinstance(patch["title"], SetTo):
                label.title = patch["title"].value
            if isinstance(patch["color"], SetTo):
                label.color = patch["color"].value

        payload = label_payload(refreshed(db, label))
        await ctx.broadcaster.emit_to_board(
            board_id, LabelUpdated.model_validate(payload.model_dump())
        )
    return payload


async def delete_label(ctx: MutationContext, label_id: int) -> None:
    """Delete a label and detach it from every card; missing labels are a no-op."""
    db = ctx.db
    label = db.get(Label, label_id)
    if label is None:
        return
    board_id = label.board_id

    async with ctx.locks.for_board(board_id):
        label = reload(db, Label, label_id)
        if label is None:
            return
        ensure_board_access(db, board_id, ctx.actor_id)
        with transaction(db, ctx.actor_id):
            db.delete(label)

        await ctx.broadcaster.emit_to_board(board_id, LabelDeleted(label_id=label_id))


async def toggle_label(ctx: MutationContext, data: LabelToggle) -> LabelToggleResponse:
    """Attach a label to a card, or detach it when the pair already exists.

    The board is resolved from the card; the label must belong to the same
    board.
    """
    db = ctx.db
    card = get_or_404(db, Card, data.card_id, "Card")
    board_id = board_id_for_card(db, card)
    label = get_or_404(db, Label, data.label_id, "Label")
    if label.board_id != board_id:
        raise ValidationError("Label and card belong to different boards")

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        if reload(db, Card, card.id) is None:
            raise NotFoundError("Card not found")
        if reload(db, Label, label.id) is None:
            raise NotFoundError("Label not found")

        link = db.get(CardLabel, (card.id, label.id), populate_existing=True)
        with transaction(db, ctx.actor_id):
            if link is not None:
                db.delete(link)
            else:
                db.add(CardLabel(card_id=card.id, label_id=label.id))

        if link is not None:
            await ctx.broadcaster.emit_to_board(
                board_id, CardLabelRemoved(card_id=card.id, label_id=label.id)
            )
            return LabelToggleResponse(action="removed")

        payload = label_payload(refreshed(db, label))
        await ctx.broadcaster.emit_to_board(
            board_id, CardLabelAdded(card_id=card.id, label=payload)
        )
        return LabelToggleResponse(action="added", label=payload)
