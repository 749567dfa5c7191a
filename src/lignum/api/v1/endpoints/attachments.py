# src/lignum/api/v1/endpoints/attachments.py
"""Attachment metadata endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from lignum.schemas.attachment import AttachmentCreate, AttachmentResponse
from lignum.services import attachments as attachment_service

from ..dependencies import MutationDep

router = APIRouter(prefix="/attachments", tags=["attachments"])


@router.post("", response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
async def add_attachment(attachment_data: AttachmentCreate, ctx: MutationDep) -> AttachmentResponse:
    """Register an uploaded file on a card."""
    return await attachment_service.add_attachment(ctx, attachment_data)


@router.delete(
    "/{attachment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_attachment(attachment_id: int, ctx: MutationDep) -> Response:
    await attachment_service.delete_attachment(ctx, attachment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
