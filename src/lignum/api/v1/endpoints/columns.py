# src/lignum/api/v1/endpoints/columns.py
"""Column endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from lignum.schemas.column import (
    ColumnCreate,
    ColumnMove,
    ColumnResponse,
    ColumnUpdate,
    ColumnWithCards,
)
from lignum.services import columns as column_service

from ..dependencies import CurrentUserDep, MutationDep, SessionDep

router = APIRouter(prefix="/columns", tags=["columns"])


@router.get("", response_model=list[ColumnWithCards])
async def list_columns(
    current_user: CurrentUserDep,
    db: SessionDep,
    board_id: int = Query(alias="boardId"),
) -> list[ColumnWithCards]:
    """List a board's columns in order, each with its cards in rank order."""
    return column_service.list_columns(db, current_user.id, board_id)


@router.post("", response_model=ColumnResponse, status_code=status.HTTP_201_CREATED)
async def create_column(column_data: ColumnCreate, ctx: MutationDep) -> ColumnResponse:
    return await column_service.create_column(ctx, column_data)


@router.patch("/{column_id}", response_model=ColumnResponse)
async def update_column(
    column_id: int,
    column_data: ColumnUpdate,
    ctx: MutationDep,
) -> ColumnResponse:
    return await column_service.update_column(ctx, column_id, column_data)


@router.patch("/{column_id}/move", response_model=list[ColumnResponse])
async def move_column(
    column_id: int,
    move: ColumnMove,
    ctx: MutationDep,
) -> list[ColumnResponse]:
    """Move a column to a new index; returns the board's columns in order."""
    return await column_service.move_column(ctx, column_id, move)


@router.delete(
    "/{column_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_column(column_id: int, ctx: MutationDep) -> Response:
    await column_service.delete_column(ctx, column_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
