"""Room view builders used by REST, websocket acks and broadcasts."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fanfare.rooms.registry import Player
    from fanfare.rooms.registry import Session


def player_detail(player: Player) -> dict[str, object]:
    return {
        "player_id": player.connection_id,
        "display_name": player.display_name,
        "character_id": player.character_id,
        "is_host": player.is_host,
    }


def room_summary(session: Session) -> dict[str, object]:
    return {
        "room_id": session.code,
        "status": session.status,
        "player_count": len(session.players),
        "max_players": session.max_players,
    }


def room_detail(session: Session) -> dict[str, object]:
    return {
        "room_id": session.code,
        "status": session.status,
        "host_id": session.host_id,
        "max_players": session.max_players,
        "players": [player_detail(player) for player in session.players],
        "winner_id": session.winner_id,
    }
