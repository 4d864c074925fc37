"""WebSocket route handler for the game channel."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter
from fastapi import WebSocket
from fastapi import WebSocketDisconnect

import fanfare.runtime as runtime

from .handlers import handle_ws_message
from .protocol import send_frame

logger = logging.getLogger(__name__)

router = APIRouter()


async def disconnect_connection(connection_id: str) -> None:
    """Drop a connection from its room exactly once and tell the others."""
    runtime.hub.unregister(connection_id)
    outcome = runtime.registry.leave(connection_id)
    if outcome is None:
        return
    await runtime.hub.deliver(outcome.room_code, outcome.events)


@router.websocket("/ws")
async def ws_game(websocket: WebSocket) -> None:
    """Game websocket: one connection id per socket, intents in, acks and events out."""
    await websocket.accept()
    connection_id = uuid.uuid4().hex
    runtime.hub.register(connection_id, websocket)
    logger.info("connection %s opened", connection_id)
    try:
        await send_frame(websocket, "connected", {"connection_id": connection_id})
        while True:
            message = await websocket.receive_text()
            await handle_ws_message(websocket=websocket, connection_id=connection_id, message=message)
    except WebSocketDisconnect:
        pass
    finally:
        logger.info("connection %s closed", connection_id)
        await disconnect_connection(connection_id)
