# src/lignum/api/v1/endpoints/labels.py
"""Label endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from lignum.schemas.label import (
    LabelCreate,
    LabelResponse,
    LabelToggle,
    LabelToggleResponse,
    LabelUpdate,
)
from lignum.services import labels as label_service

from ..dependencies import MutationDep

router = APIRouter(prefix="/labels", tags=["labels"])


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
async def create_label(label_data: LabelCreate, ctx: MutationDep) -> LabelResponse:
    return await label_service.create_label(ctx, label_data)


@router.post("/toggle", response_model=LabelToggleResponse)
async def toggle_label(toggle: LabelToggle, ctx: MutationDep) -> LabelToggleResponse:
    """Attach the label to the card, or detach it if already attached."""
    return await label_service.toggle_label(ctx, toggle)


@router.patch("/{label_id}", response_model=LabelResponse)
async def update_label(label_id: int, label_data: LabelUpdate, ctx: MutationDep) -> LabelResponse:
    return await label_service.update_label(ctx, label_id, label_data)


@router.delete(
    "/{label_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_label(label_id: int, ctx: MutationDep) -> Response:
    await label_service.delete_label(ctx, label_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
