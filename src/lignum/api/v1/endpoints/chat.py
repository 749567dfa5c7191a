# src/lignum/api/v1/endpoints/chat.py
"""Board chat endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from lignum.schemas.chat import ChatMessageCreate, ChatMessageResponse
from lignum.services import chat as chat_service

from ..dependencies import CurrentUserDep, MutationDep, SessionDep

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/{board_id}", response_model=list[ChatMessageResponse])
async def list_messages(
    board_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[ChatMessageResponse]:
    """List a board's chat history, oldest first."""
    return chat_service.list_messages(db, current_user.id, board_id)


@router.post(
    "/{board_id}",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_message(
    board_id: int,
    message: ChatMessageCreate,
    ctx: MutationDep,
) -> ChatMessageResponse:
    return await chat_service.post_message(ctx, board_id, message)


@router.patch("/messages/{message_id}/pin", response_model=ChatMessageResponse)
async def toggle_pin(message_id: int, ctx: MutationDep) -> ChatMessageResponse:
    """Pin or unpin a message."""
    return await chat_service.toggle_pin(ctx, message_id)
