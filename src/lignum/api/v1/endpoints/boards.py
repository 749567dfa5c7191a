# src/lignum/api/v1/endpoints/boards.py
"""Board endpoints: lifecycle and membership."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from lignum.schemas.board import BoardCreate, BoardSnapshot, BoardSummary, MemberAdd
from lignum.schemas.user import MemberSummary
from lignum.services import boards as board_service
from lignum.services import members as member_service

from ..dependencies import CurrentUserDep, MutationDep, SessionDep

router = APIRouter(prefix="/boards", tags=["boards"])


@router.post("", response_model=BoardSnapshot, status_code=status.HTTP_201_CREATED)
async def create_board(board_data: BoardCreate, ctx: MutationDep) -> BoardSnapshot:
    """Create a board with the default columns and invite its members."""
    return await board_service.create_board(ctx, board_data)


@router.get("", response_model=list[BoardSummary])
async def list_boards(current_user: CurrentUserDep, db: SessionDep) -> list[BoardSummary]:
    """List boards the caller owns or belongs to."""
    return board_service.list_boards(db, current_user.id)


@router.get("/{board_id}", response_model=BoardSnapshot)
async def get_board(
    board_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BoardSnapshot:
    """Return the full board state: columns with cards, labels and members."""
    return board_service.get_board(db, current_user.id, board_id)


@router.delete(
    "/{board_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_board(board_id: int, ctx: MutationDep) -> Response:
    """Delete a board. Only the owner may do this."""
    await board_service.delete_board(ctx, board_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{board_id}/members",
    response_model=MemberSummary,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(board_id: int, member: MemberAdd, ctx: MutationDep) -> MemberSummary:
    """Add a user to the board."""
    return await member_service.add_member(ctx, board_id, member.user_id)


@router.delete(
    "/{board_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def remove_member(board_id: int, user_id: int, ctx: MutationDep) -> Response:
    """Remove a member; members may also remove themselves."""
    await member_service.remove_member(ctx, board_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
