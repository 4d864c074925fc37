"""Read-only room REST routes."""

from __future__ import annotations

from fastapi import APIRouter

import fanfare.runtime as runtime
from fanfare.api.errors import raise_game_error
from fanfare.api.room_views import room_detail
from fanfare.api.room_views import room_summary
from fanfare_engine.errors import GameError

router = APIRouter()


@router.get("/api/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@router.get("/api/rooms")
def list_rooms() -> list[dict[str, object]]:
    return [room_summary(session) for session in runtime.registry.list_sessions()]


@router.get("/api/rooms/{room_id}")
def get_room_detail(room_id: str) -> dict[str, object]:
    """Return one room detail; codes match case-insensitively."""
    try:
        with runtime.registry.lock_session(room_id) as session:
            return room_detail(session)
    except GameError as exc:
        raise_game_error(exc)
