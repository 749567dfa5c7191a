# src/lignum/api/v1/endpoints/realtime.py
"""WebSocket endpoint carrying board and user room events."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from lignum.core.security import InvalidTokenError, decode_user_id
from lignum.services.broadcaster import RoomBroadcaster
from lignum.services.realtime import FrameDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def board_socket(websocket: WebSocket, token: str | None = Query(default=None)) -> None:
    """Authenticate with ``?token=`` and relay room events until disconnect."""
    if token is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    try:
        user_id = decode_user_id(token)
    except InvalidTokenError:
        logger.warning("Rejected websocket connection with an invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    broadcaster: RoomBroadcaster = websocket.app.state.broadcaster
    await websocket.accept()
    connection_id = broadcaster.register(websocket, user_id)
    dispatcher = FrameDispatcher(broadcaster, connection_id, user_id)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            text = message.get("text")
            if text is None:
                await dispatcher.handle_binary()
            else:
                await dispatcher.handle_text(text)
    except WebSocketDisconnect:
        logger.debug("Connection %s of user %s closed", connection_id, user_id)
    finally:
        broadcaster.unregister(connection_id)
