"""Wire envelope for the game websocket: versioned server frames and intent acks."""

from __future__ import annotations

from typing import Any

WS_PROTOCOL_VERSION = 1


def server_frame(event: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"v": WS_PROTOCOL_VERSION, "type": event, "payload": payload}


async def send_frame(websocket: Any, event: str, payload: dict[str, Any]) -> None:
    await websocket.send_json(server_frame(event, payload))


def ack_payload(
    *,
    intent: str | None,
    request_id: Any,
    result: dict[str, Any] | None = None,
    error: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the single ack every intent receives: {success, error?, ...data}."""
    payload: dict[str, Any] = {"request_id": request_id, "intent": intent, "success": error is None}
    if error is not None:
        payload["error"] = error["message"]
        payload["code"] = error["code"]
        payload["category"] = error["category"]
        payload["detail"] = error["detail"]
        return payload
    payload.update(result or {})
    return payload


async def send_ack(websocket: Any, **fields: Any) -> None:
    await send_frame(websocket, "ack", ack_payload(**fields))
