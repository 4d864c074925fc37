"""Inbound intent dispatch for the game websocket."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

import pydantic

import fanfare.runtime as runtime
from fanfare.rooms.models import CreateRoomRequest
from fanfare.rooms.models import JoinRoomRequest
from fanfare.rooms.models import PlayCardsRequest
from fanfare.rooms.models import UseSkillCardRequest
from fanfare.rooms.registry import SessionOutcome
from fanfare.rooms.registry import SessionRegistry
from fanfare_engine.errors import GameError
from fanfare_engine.errors import ValidationError

from .protocol import send_ack
from .protocol import send_frame

logger = logging.getLogger(__name__)

IntentHandler = Callable[[SessionRegistry, str, dict[str, Any]], SessionOutcome]

ROOM_ENTRY_INTENTS = frozenset({"create_room", "join_room"})


def _create_room(registry: SessionRegistry, connection_id: str, payload: dict[str, Any]) -> SessionOutcome:
    request = CreateRoomRequest.model_validate(payload)
    return registry.create(
        display_name=request.display_name,
        character_id=request.character_id,
        max_players=request.max_players,
        requester_id=connection_id,
    )


def _join_room(registry: SessionRegistry, connection_id: str, payload: dict[str, Any]) -> SessionOutcome:
    request = JoinRoomRequest.model_validate(payload)
    return registry.join(
        room_code=request.room_id,
        display_name=request.display_name,
        character_id=request.character_id,
        requester_id=connection_id,
    )


def _start_game(registry: SessionRegistry, connection_id: str, payload: dict[str, Any]) -> SessionOutcome:
    return registry.start_game(connection_id)


def _end_turn(registry: SessionRegistry, connection_id: str, payload: dict[str, Any]) -> SessionOutcome:
    return registry.end_turn(connection_id)


def _draw_card(registry: SessionRegistry, connection_id: str, payload: dict[str, Any]) -> SessionOutcome:
    return registry.draw_card(connection_id)


def _play_cards(registry: SessionRegistry, connection_id: str, payload: dict[str, Any]) -> SessionOutcome:
    request = PlayCardsRequest.model_validate(payload)
    return registry.play_cards(connection_id, [card.to_card() for card in request.cards])


def _use_skill_card(registry: SessionRegistry, connection_id: str, payload: dict[str, Any]) -> SessionOutcome:
    request = UseSkillCardRequest.model_validate(payload)
    return registry.use_skill_card(connection_id, request.skill_id)


INTENT_HANDLERS: dict[str, IntentHandler] = {
    "create_room": _create_room,
    "join_room": _join_room,
    "start_game": _start_game,
    "end_turn": _end_turn,
    "draw_card": _draw_card,
    "play_cards": _play_cards,
    "use_skill_card": _use_skill_card,
}


def dispatch_intent(
    registry: SessionRegistry,
    connection_id: str,
    intent: Any,
    payload: Any,
) -> SessionOutcome:
    """Validate and run one intent synchronously; raises GameError on rejection."""
    handler = INTENT_HANDLERS.get(intent) if isinstance(intent, str) else None
    if handler is None:
        raise ValidationError("UNKNOWN_INTENT", "unknown intent", {"intent": intent})
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("VALIDATION_ERROR", "payload must be an object")
    try:
        return handler(registry, connection_id, payload)
    except pydantic.ValidationError as exc:
        errors = [
            {"loc": [str(part) for part in error["loc"]], "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        raise ValidationError("VALIDATION_ERROR", "malformed payload", {"errors": errors}) from exc


def parse_frame(message: str) -> tuple[Any, Any, Any]:
    """Split a client frame into (intent, request_id, payload)."""
    try:
        frame = json.loads(message)
    except json.JSONDecodeError as exc:
        raise ValidationError("VALIDATION_ERROR", "frame is not valid JSON") from exc
    if not isinstance(frame, dict):
        raise ValidationError("VALIDATION_ERROR", "frame must be an object")
    return frame.get("type"), frame.get("request_id"), frame.get("payload")


async def handle_ws_message(*, websocket: Any, connection_id: str, message: str) -> None:
    if message == "PING":
        await send_frame(websocket, "PONG", {})
        return

    intent: Any = None
    request_id: Any = None
    try:
        intent, request_id, payload = parse_frame(message)
        outcome = dispatch_intent(runtime.registry, connection_id, intent, payload)
    except GameError as exc:
        logger.debug("rejected %s from %s: %s", intent, connection_id, exc.code)
        await send_ack(websocket, intent=intent, request_id=request_id, error=exc.to_payload())
        return
    except Exception:
        logger.exception("intent %s from %s crashed", intent, connection_id)
        error = GameError("INTERNAL_ERROR", "internal server error").to_payload()
        await send_ack(websocket, intent=intent, request_id=request_id, error=error)
        return

    if intent in ROOM_ENTRY_INTENTS:
        runtime.hub.join_room(outcome.room_code, connection_id)
    await send_ack(websocket, intent=intent, request_id=request_id, result=outcome.result)
    await runtime.hub.deliver(outcome.room_code, outcome.events)
