# src/lignum/services/access.py
"""Board access checks shared by the REST handlers and the realtime layer."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session

from lignum.models import Board, BoardMember
from lignum.services.errors import ForbiddenError, NotFoundError


def is_board_member(db: Session, board: Board, user_id: int) -> bool:
    """Return True if ``user_id`` owns ``board`` or is in its member set."""
    if board.owner_id == user_id:
        return True
    return db.get(BoardMember, (board.id, user_id)) is not None


def ensure_board_access(db: Session, board_id: int, user_id: int) -> Board:
    """Return the board if the user may act on it.

    Raises:
        NotFoundError: If the board does not exist.
        ForbiddenError: If the user is neither owner nor member.
    """
    board = db.get(Board, board_id)
    if board is None:
        raise NotFoundError("Board not found")
    if not is_board_member(db, board, user_id):
        raise ForbiddenError("You do not have access to this board")
    return board


class AccessGuard:
    """Membership predicate for realtime room joins.

    Each check opens a short-lived session from ``session_factory`` so the
    guard never shares a request's unit of work.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def can_join_board(self, board_id: int, user_id: int) -> bool:
        db = self._session_factory()
        try:
            board = db.get(Board, board_id)
            if board is None:
                return False
            return is_board_member(db, board, user_id)
        finally:
            db.close()
