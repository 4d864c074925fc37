"""Game websocket tests: intents, acks and room broadcasts over a real socket."""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient


def _receive_type(websocket: Any, event_type: str) -> dict[str, Any]:
    message = websocket.receive_json()
    assert message["type"] == event_type, message
    return message["payload"]


def _send_intent(websocket: Any, intent: str, payload: dict[str, Any] | None = None, request_id: int = 1) -> None:
    websocket.send_json({"type": intent, "request_id": request_id, "payload": payload or {}})


def _open_room(host_ws: Any, guest_ws: Any) -> tuple[str, str, str]:
    host_id = _receive_type(host_ws, "connected")["connection_id"]
    guest_id = _receive_type(guest_ws, "connected")["connection_id"]

    _send_intent(host_ws, "create_room", {"display_name": "Host", "character_id": 4, "max_players": 4})
    ack = _receive_type(host_ws, "ack")
    assert ack["success"] is True
    room_id = ack["room_id"]

    _send_intent(guest_ws, "join_room", {"room_id": room_id.lower(), "display_name": "Guest", "character_id": 1})
    ack = _receive_type(guest_ws, "ack")
    assert ack["success"] is True
    assert ack["room_id"] == room_id

    joined = _receive_type(host_ws, "player_joined")
    assert joined["player"]["player_id"] == guest_id
    return room_id, host_id, guest_id


def test_ws_01_create_join_start_and_reject(client: TestClient) -> None:
    """Flow: create, join, start, off-turn end_turn, malformed play -> acks and broadcasts."""
    with client.websocket_connect("/ws") as host_ws, client.websocket_connect("/ws") as guest_ws:
        _, host_id, guest_id = _open_room(host_ws, guest_ws)

        _send_intent(host_ws, "start_game", request_id=7)
        ack = _receive_type(host_ws, "ack")
        assert ack == {"request_id": 7, "intent": "start_game", "success": True, "room_id": ack["room_id"]}

        started = _receive_type(host_ws, "game_started")
        assert started["current_player_id"] == host_id
        assert started["hand_counts"] == {host_id: 7, guest_id: 7}
        assert started["deck_count"] == 49
        host_hand = _receive_type(host_ws, "receive_hand")
        assert len(host_hand["hand"]) == 7

        assert _receive_type(guest_ws, "game_started")["seed"] == started["seed"]
        assert len(_receive_type(guest_ws, "receive_hand")["hand"]) == 7

        _send_intent(guest_ws, "end_turn", request_id=8)
        ack = _receive_type(guest_ws, "ack")
        assert ack["success"] is False
        assert ack["category"] == "AUTHORIZATION_ERROR"
        assert ack["code"] == "NOT_YOUR_TURN"

        _send_intent(host_ws, "play_cards", {"cards": []}, request_id=9)
        ack = _receive_type(host_ws, "ack")
        assert ack["success"] is False
        assert ack["category"] == "VALIDATION_ERROR"

        _send_intent(host_ws, "shuffle_everything", request_id=10)
        ack = _receive_type(host_ws, "ack")
        assert ack["code"] == "UNKNOWN_INTENT"

        _send_intent(host_ws, "end_turn", request_id=11)
        ack = _receive_type(host_ws, "ack")
        assert ack["success"] is True
        assert ack["current_player_id"] == guest_id
        assert _receive_type(host_ws, "turn_changed")["current_player_id"] == guest_id
        assert _receive_type(guest_ws, "turn_changed")["current_player_id"] == guest_id


def test_ws_02_ping_and_bad_frames(client: TestClient) -> None:
    with client.websocket_connect("/ws") as websocket:
        _receive_type(websocket, "connected")

        websocket.send_text("PING")
        assert websocket.receive_json()["type"] == "PONG"

        websocket.send_text("{not json")
        ack = _receive_type(websocket, "ack")
        assert ack["success"] is False
        assert ack["code"] == "VALIDATION_ERROR"

        _send_intent(websocket, "join_room", {"room_id": "ZZZZZZ", "display_name": "X", "character_id": 1})
        ack = _receive_type(websocket, "ack")
        assert ack["success"] is False
        assert ack["code"] == "ROOM_NOT_FOUND"
        assert ack["error"] == "room not found"


def test_ws_03_host_disconnect_promotes_guest(client: TestClient) -> None:
    """Flow: host socket closes in the lobby -> guest gets player_left, host_changed, you_are_host."""
    with client.websocket_connect("/ws") as guest_ws:
        with client.websocket_connect("/ws") as host_ws:
            room_id, host_id, guest_id = _open_room(host_ws, guest_ws)
            host_ws.close()

            left = _receive_type(guest_ws, "player_left")
            assert left["player_id"] == host_id
        assert _receive_type(guest_ws, "host_changed") == {"new_host_id": guest_id}
        assert _receive_type(guest_ws, "you_are_host") == {"room_id": room_id}

        response = client.get(f"/api/rooms/{room_id}")
        assert response.json()["host_id"] == guest_id
