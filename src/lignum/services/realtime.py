# src/lignum/services/realtime.py
"""Client-to-server frame handling for realtime connections.

Frames are JSON objects ``{"event": <name>, "data": <payload>}``. Supported
client events are ``join_board``, ``join_user``, ``leave_board`` and
``ping``; anything else is ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from lignum.schemas.events import AccessDenied, ErrorEvent, KickedFromBoard, Pong
from lignum.services.broadcaster import RoomBroadcaster

logger = logging.getLogger(__name__)


def _int_value(data: Any, key: str) -> int | None:
    """Read an id sent either bare or as ``{key: id}``."""
    if isinstance(data, dict):
        data = data.get(key)
    if isinstance(data, bool) or not isinstance(data, int):
        return None
    return data


class FrameDispatcher:
    """Routes decoded client frames for one connection to the broadcaster."""

    def __init__(self, broadcaster: RoomBroadcaster, connection_id: str, user_id: int) -> None:
        self.broadcaster = broadcaster
        self.connection_id = connection_id
        self.user_id = user_id

    async def handle_text(self, raw: str) -> None:
        try:
            frame = json.loads(raw)
        except json.JSONDecodeError:
            await self._error("Frame is not valid JSON")
            return
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            await self._error("Frame must be an object with an 'event' name")
            return
        await self.handle(frame["event"], frame.get("data"))

    async def handle_binary(self) -> None:
        await self._error("Binary frames are not supported; send JSON text")

    async def handle(self, event: str, data: Any) -> None:
        if event == "join_board":
            await self._join_board(data)
        elif event == "join_user":
            user_id = _int_value(data, "userId")
            if user_id is None:
                await self._error("join_user expects a user id")
                return
            await self.broadcaster.join_user_room(self.connection_id, user_id)
        elif event == "leave_board":
            board_id = _int_value(data, "boardId")
            if board_id is None:
                await self._error("leave_board expects a board id")
                return
            self.broadcaster.leave_board_room(self.connection_id, board_id)
        elif event == "ping":
            await self.broadcaster.send_to_connection(self.connection_id, Pong())
        else:
            logger.debug("Ignoring unknown client event %r", event)

    async def _join_board(self, data: Any) -> None:
        board_id = _int_value(data, "boardId")
        if board_id is None:
            await self._error("join_board expects a board id")
            return

        claimed = data.get("userId") if isinstance(data, dict) else None
        if claimed is not None and claimed != self.user_id:
            logger.warning(
                "Connection %s claimed user %s but is authenticated as %s",
                self.connection_id,
                claimed,
                self.user_id,
            )
            self.broadcaster.leave_board_room(self.connection_id, board_id)
            await self.broadcaster.send_to_connection(
                self.connection_id,
                AccessDenied(board_id=board_id, reason="User id does not match token"),
            )
            await self.broadcaster.send_to_connection(
                self.connection_id, KickedFromBoard(board_id=board_id)
            )
            return

        await self.broadcaster.join_board_room(self.connection_id, board_id)

    async def _error(self, message: str) -> None:
        await self.broadcaster.send_to_connection(self.connection_id, ErrorEvent(message=message))
