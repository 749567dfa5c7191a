# src/lignum/api/v1/endpoints/users.py
"""User directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from lignum.models import User
from lignum.schemas.user import UserResponse

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(_current_user: CurrentUserDep, db: SessionDep) -> list[User]:
    """List users that can be invited to a board."""
    return db.query(User).order_by(User.name, User.id).all()


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: CurrentUserDep) -> User:
    return current_user
