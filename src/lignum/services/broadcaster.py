"""Room-based fan-out of board events to live connections.

Connections are registered under their authenticated user id. Board rooms
and user rooms are indices derived from the connection registry; every
mutation of those indices happens on the event loop, so no lock guards them.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Protocol

from lignum.schemas.events import (
    AccessDenied,
    JoinedBoard,
    KickedFromBoard,
    ServerEvent,
)
from lignum.services.access import AccessGuard

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Anything that can push a JSON frame to one client."""

    async def send_json(self, data: Any) -> None:
        ...


@dataclass
class ConnectionState:
    """Registry entry for one live connection."""

    connection: Connection
    user_id: int
    board_ids: set[int] = field(default_factory=set)
    send_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class RoomBroadcaster:
    """Tracks room membership and delivers events at most once.

    A failed send never propagates to the emitter: the connection is logged,
    unregistered and skipped.
    """

    def __init__(self, guard: AccessGuard) -> None:
        self._guard = guard
        self._connections: dict[str, ConnectionState] = {}
        self._board_rooms: defaultdict[int, set[str]] = defaultdict(set)
        self._user_rooms: defaultdict[int, set[str]] = defaultdict(set)

    # Registry

    def register(self, connection: Connection, user_id: int) -> str:
        """Register a connection and place it in its user's room."""
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = ConnectionState(
            connection=connection,
            user_id=user_id,
        )
        self._user_rooms[user_id].add(connection_id)
        logger.debug("Registered connection %s for user %s", connection_id, user_id)
        return connection_id

    def unregister(self, connection_id: str) -> None:
        """Drop a connection from every room it is in."""
        state = self._connections.pop(connection_id, None)
        if state is None:
            return
        for board_id in state.board_ids:
            self._discard(self._board_rooms, board_id, connection_id)
        self._discard(self._user_rooms, state.user_id, connection_id)
        logger.debug("Unregistered connection %s", connection_id)

    def get(self, connection_id: str) -> ConnectionState | None:
        return self._connections.get(connection_id)

    def board_room(self, board_id: int) -> set[str]:
        """Return the connection ids currently in a board room."""
        return set(self._board_rooms.get(board_id, ()))

    def user_room(self, user_id: int) -> set[str]:
        return set(self._user_rooms.get(user_id, ()))

    # Room membership

    async def join_board_room(self, connection_id: str, board_id: int) -> bool:
        """Admit a connection to a board room if its user may see the board.

        On denial the requester alone receives ``access_denied`` followed by
        ``kicked_from_board``, and any membership it held is removed.
        """
        state = self._connections.get(connection_id)
        if state is None:
            return False

        if not self._guard.can_join_board(board_id, state.user_id):
            self._leave(connection_id, state, board_id)
            logger.warning(
                "User %s denied access to board %s", state.user_id, board_id
            )
            await self._send(
                connection_id,
                AccessDenied(board_id=board_id, reason="Not a member of this board"),
            )
            await self._send(connection_id, KickedFromBoard(board_id=board_id))
            return False

        state.board_ids.add(board_id)
        self._board_rooms[board_id].add(connection_id)
        logger.info("User %s joined board room %s", state.user_id, board_id)
        await self._send(connection_id, JoinedBoard(board_id=board_id))
        return True

    def leave_board_room(self, connection_id: str, board_id: int) -> None:
        state = self._connections.get(connection_id)
        if state is not None:
            self._leave(connection_id, state, board_id)

    async def join_user_room(self, connection_id: str, user_id: int) -> bool:
        """Confirm the connection's user room.

        The user room is fixed at registration; asking for any other user's
        room is refused.
        """
        state = self._connections.get(connection_id)
        if state is None:
            return False
        if user_id != state.user_id:
            logger.warning(
                "User %s tried to join the room of user %s", state.user_id, user_id
            )
            await self._send(
                connection_id,
                AccessDenied(reason="Cannot join another user's room"),
            )
            return False
        return True

    def evict_user_from_board(self, user_id: int, board_id: int) -> int:
        """Remove every connection of ``user_id`` from a board room.

        Returns:
            The number of connections evicted.
        """
        evicted = 0
        for connection_id in list(self._user_rooms.get(user_id, ())):
            state = self._connections.get(connection_id)
            if state is not None and board_id in state.board_ids:
                self._leave(connection_id, state, board_id)
                evicted += 1
        if evicted:
            logger.info(
                "Evicted %d connection(s) of user %s from board %s",
                evicted,
                user_id,
                board_id,
            )
        return evicted

    def close_board_room(self, board_id: int) -> None:
        """Empty a board room, e.g. after the board was deleted."""
        for connection_id in self._board_rooms.pop(board_id, set()):
            state = self._connections.get(connection_id)
            if state is not None:
                state.board_ids.discard(board_id)
        logger.info("Closed board room %s", board_id)

    # Delivery

    async def emit_to_board(self, board_id: int, event: ServerEvent) -> None:
        frame = event.frame()
        for connection_id in list(self._board_rooms.get(board_id, ())):
            await self._deliver(connection_id, frame, board_id=board_id)

    async def emit_to_user(self, user_id: int, event: ServerEvent) -> None:
        frame = event.frame()
        for connection_id in list(self._user_rooms.get(user_id, ())):
            await self._deliver(connection_id, frame, user_id=user_id)

    async def send_to_connection(self, connection_id: str, event: ServerEvent) -> None:
        await self._send(connection_id, event)

    async def _send(self, connection_id: str, event: ServerEvent) -> None:
        await self._deliver(connection_id, event.frame())

    async def _deliver(
        self,
        connection_id: str,
        frame: dict[str, Any],
        *,
        board_id: int | None = None,
        user_id: int | None = None,
    ) -> bool:
        state = self._connections.get(connection_id)
        if state is None:
            return False
        async with state.send_lock:
            # Membership may have changed while waiting for the lock.
            if not self._still_addressed(connection_id, state, board_id, user_id):
                return False
            try:
                await state.connection.send_json(frame)
            except Exception as exc:
                logger.warning(
                    "Dropping connection %s after failed send of %s: %s",
                    connection_id,
                    frame.get("event"),
                    exc,
                )
                self.unregister(connection_id)
                return False
        return True

    def _still_addressed(
        self,
        connection_id: str,
        state: ConnectionState,
        board_id: int | None,
        user_id: int | None,
    ) -> bool:
        if self._connections.get(connection_id) is not state:
            return False
        if board_id is not None and board_id not in state.board_ids:
            return False
        if user_id is not None and state.user_id != user_id:
            return False
        return True

    def _leave(self, connection_id: str, state: ConnectionState, board_id: int) -> None:
        state.board_ids.discard(board_id)
        self._discard(self._board_rooms, board_id, connection_id)

    @staticmethod
    def _discard(rooms: defaultdict[int, set[str]], key: int, connection_id: str) -> None:
        members = rooms.get(key)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            rooms.pop(key, None)
