# src/lignum/schemas/user.py
"""User-related Pydantic schemas."""

from .common import CamelModel


class UserResponse(CamelModel):
    """Public profile of a board user."""

    id: int
    name: str
    email: str
    avatar: str | None = None


class MemberSummary(CamelModel):
    """Compact user entry used in board member lists and events."""

    id: int
    name: str
    avatar: str | None = None
