"""Connection hub: room-scoped fan-out and unicast delivery."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Any

from fanfare_engine.events import OutboundEvent
from fanfare_engine.events import PlayerTarget

from .protocol import send_frame

logger = logging.getLogger(__name__)


class ConnectionHub:
    """Tracks live websockets and which room each one listens to.

    Delivery is fire-and-forget: a failed send drops the connection and is
    never retried.
    """

    def __init__(self) -> None:
        self._connections: dict[str, Any] = {}
        self._rooms: dict[str, set[str]] = {}
        self._connection_room: dict[str, str] = {}

    def register(self, connection_id: str, websocket: Any) -> None:
        self._connections[connection_id] = websocket

    def unregister(self, connection_id: str) -> None:
        self._connections.pop(connection_id, None)
        self.leave_room(connection_id)

    def join_room(self, room_id: str, connection_id: str) -> None:
        self.leave_room(connection_id)
        self._rooms.setdefault(room_id, set()).add(connection_id)
        self._connection_room[connection_id] = room_id

    def leave_room(self, connection_id: str) -> None:
        room_id = self._connection_room.pop(connection_id, None)
        if room_id is None:
            return
        listeners = self._rooms.get(room_id)
        if listeners is None:
            return
        listeners.discard(connection_id)
        if not listeners:
            self._rooms.pop(room_id, None)

    def room_members(self, room_id: str) -> set[str]:
        return set(self._rooms.get(room_id, ()))

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    async def send_to_connection(self, connection_id: str, event: str, payload: dict[str, Any]) -> None:
        websocket = self._connections.get(connection_id)
        if websocket is None:
            return
        try:
            await send_frame(websocket, event, payload)
        except Exception:
            logger.debug("dropping stale connection %s", connection_id, exc_info=True)
            self.unregister(connection_id)

    async def broadcast_to_room(self, room_id: str, event: str, payload: dict[str, Any]) -> None:
        for connection_id in sorted(self.room_members(room_id)):
            await self.send_to_connection(connection_id, event, payload)

    async def broadcast_to_room_except(
        self,
        room_id: str,
        exclude_id: str,
        event: str,
        payload: dict[str, Any],
    ) -> None:
        for connection_id in sorted(self.room_members(room_id)):
            if connection_id == exclude_id:
                continue
            await self.send_to_connection(connection_id, event, payload)

    async def deliver(self, room_id: str, events: Iterable[OutboundEvent]) -> None:
        """Route engine/registry events to their targets in order."""
        for outbound in events:
            target = outbound.target
            if isinstance(target, PlayerTarget):
                await self.send_to_connection(target.connection_id, outbound.event, outbound.payload)
            elif target.exclude is not None:
                await self.broadcast_to_room_except(room_id, target.exclude, outbound.event, outbound.payload)
            else:
                await self.broadcast_to_room(room_id, outbound.event, outbound.payload)
