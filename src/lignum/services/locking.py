"""Per-board mutation locks."""

from __future__ import annotations

import asyncio
from collections import defaultdict


class BoardLocks:
    """Registry of one ``asyncio.Lock`` per board.

    A mutation holds its board's lock from the first read until its events
    have been broadcast, so writes to one board commit and broadcast in a
    single order. Different boards never contend.
    """

    def __init__(self) -> None:
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    def for_board(self, board_id: int) -> asyncio.Lock:
        return self._locks[board_id]

    def discard(self, board_id: int) -> None:
        """Forget the lock of a deleted board unless someone is waiting on it."""
        lock = self._locks.get(board_id)
        if lock is not None and not lock.locked():
            del self._locks[board_id]
