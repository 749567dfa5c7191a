# tests/helpers.py
"""Shared test doubles and small helpers."""

from __future__ import annotations

from typing import Any

from lignum.core.security import create_access_token
from lignum.models import User


class RecordingConnection:
    """Stand-in for a websocket that keeps every frame it was sent."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    async def send_json(self, data: Any) -> None:
        self.sent.append(data)

    @property
    def events(self) -> list[str]:
        return [frame["event"] for frame in self.sent]

    def frames(self, event: str) -> list[dict[str, Any]]:
        return [frame["data"] for frame in self.sent if frame["event"] == event]

    def clear(self) -> None:
        self.sent.clear()


class BrokenConnection(RecordingConnection):
    """Connection whose transport is already gone."""

    async def send_json(self, data: Any) -> None:
        raise ConnectionResetError("peer went away")


class StaticGuard:
    """Access guard answering from a fixed set of ``(board_id, user_id)`` pairs."""

    def __init__(self, allowed: set[tuple[int, int]] | None = None) -> None:
        self.allowed = allowed or set()
        self.calls: list[tuple[int, int]] = []

    def can_join_board(self, board_id: int, user_id: int) -> bool:
        self.calls.append((board_id, user_id))
        return (board_id, user_id) in self.allowed


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
