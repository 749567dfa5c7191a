# src/lignum/api/v1/endpoints/cards.py
"""Card endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from lignum.schemas.card import CardCreate, CardMove, CardResponse, CardUpdate
from lignum.services import cards as card_service

from ..dependencies import MutationDep

router = APIRouter(prefix="/cards", tags=["cards"])


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(card_data: CardCreate, ctx: MutationDep) -> CardResponse:
    """Create a card at the end of its column."""
    return await card_service.create_card(ctx, card_data)


@router.api_route("/{card_id}", methods=["PUT", "PATCH"], response_model=CardResponse)
async def update_card(card_id: int, card_data: CardUpdate, ctx: MutationDep) -> CardResponse:
    """Update the fields present in the body; ``null`` clears a field."""
    return await card_service.update_card(ctx, card_id, card_data)


@router.patch("/{card_id}/move", response_model=CardResponse)
async def move_card(card_id: int, move: CardMove, ctx: MutationDep) -> CardResponse:
    return await card_service.move_card(ctx, card_id, move)


@router.delete(
    "/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_card(card_id: int, ctx: MutationDep) -> Response:
    await card_service.delete_card(ctx, card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
