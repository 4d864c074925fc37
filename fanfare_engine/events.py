"""Outbound event value objects produced by state transitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RoomTarget:
    """Every connection in the room, optionally minus one."""

    exclude: str | None = None


@dataclass(frozen=True, slots=True)
class PlayerTarget:
    connection_id: str


EventTarget = RoomTarget | PlayerTarget


@dataclass(frozen=True, slots=True)
class OutboundEvent:
    event: str
    payload: dict[str, Any]
    target: EventTarget


def to_room(event: str, payload: dict[str, Any], *, exclude: str | None = None) -> OutboundEvent:
    return OutboundEvent(event=event, payload=payload, target=RoomTarget(exclude=exclude))


def to_player(connection_id: str, event: str, payload: dict[str, Any]) -> OutboundEvent:
    return OutboundEvent(event=event, payload=payload, target=PlayerTarget(connection_id=connection_id))


__all__ = [
    "EventTarget",
    "OutboundEvent",
    "PlayerTarget",
    "RoomTarget",
    "to_player",
    "to_room",
]
