# src/lignum/services/attachments.py
"""Attachment metadata for cards; file bytes live in an external store."""

from __future__ import annotations

from lignum.db.gateway import transaction
from lignum.models import Attachment, Card
from lignum.schemas.attachment import AttachmentCreate, AttachmentResponse
from lignum.schemas.events import AttachmentAdded, AttachmentRemoved
from lignum.services.access import ensure_board_access
from lignum.services.context import MutationContext
from lignum.services.errors import NotFoundError
from lignum.services.lookups import board_id_for_card, get_or_404, reload
from lignum.services.payloads import attachment_payload, refreshed


async def add_attachment(ctx: MutationContext, data: AttachmentCreate) -> AttachmentResponse:
    db = ctx.db
    board_id = board_id_for_card(db, get_or_404(db, Card, data.card_id, "Card"))

    async with ctx.locks.for_board(board_id):
        ensure_board_access(db, board_id, ctx.actor_id)
        if reload(db, Card, data.card_id) is None:
            raise NotFoundError("Card not found")
        with transaction(db, ctx.actor_id):
            attachment = Attachment(
                card_id=data.card_id,
                file_name=data.file_name,
                stored_name=data.stored_name,
                mime_type=data.mime_type,
            )
            db.add(attachment)
            db.flush()

        payload = attachment_payload(refreshed(db, attachment))
        await ctx.broadcaster.emit_to_board(
            board_id, AttachmentAdded(card_id=data.card_id, attachment=payload)
        )
    return payload


async def delete_attachment(ctx: MutationContext, attachment_id: int) -> None:
    db = ctx.db
    attachment = db.get(Attachment, attachment_id)
    if attachment is None:
        return
    card_id = attachment.card_id
    board_id = board_id_for_card(db, get_or_404(db, Card, card_id, "Card"))

    async with ctx.locks.for_board(board_id):
        attachment = reload(db, Attachment, attachment_id)
        if attachment is None:
            return
        ensure_board_access(db, board_id, ctx.actor_id)
        with transaction(db, ctx.actor_id):
            db.delete(attachment)

        await ctx.broadcaster.emit_to_board(
            board_id, AttachmentRemoved(card_id=card_id, attachment_id=attachment_id)
        )
