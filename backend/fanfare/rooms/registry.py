"""In-memory session registry: room codes, rosters, hosts and the embedded game."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import field
import logging
import random
import string
import threading
from typing import Any

from fanfare.api.room_views import player_detail
from fanfare.api.room_views import room_detail
from fanfare_engine.cards import Card
from fanfare_engine.core import ActionOutcome
from fanfare_engine.core import GameEngine
from fanfare_engine.core import MAX_PLAYERS
from fanfare_engine.errors import ResourceError
from fanfare_engine.errors import TerminalStateError
from fanfare_engine.errors import ValidationError
from fanfare_engine.events import OutboundEvent
from fanfare_engine.events import to_player
from fanfare_engine.events import to_room
from fanfare_engine.rules import require_host

logger = logging.getLogger(__name__)

ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = string.digits + string.ascii_uppercase
MIN_MAX_PLAYERS = 2
MAX_MAX_PLAYERS = MAX_PLAYERS
DEFAULT_MAX_PLAYERS = MAX_PLAYERS


class RoomNotFoundError(ResourceError):
    def __init__(self, room_code: str) -> None:
        super().__init__("ROOM_NOT_FOUND", "room not found", {"room_id": room_code})


class RoomFullError(ResourceError):
    def __init__(self, room_code: str, max_players: int) -> None:
        super().__init__("ROOM_FULL", "room is full", {"room_id": room_code, "max_players": max_players})


class AlreadyInRoomError(ResourceError):
    def __init__(self, room_code: str) -> None:
        super().__init__("ALREADY_IN_ROOM", "connection is already in a room", {"room_id": room_code})


class NotInRoomError(ResourceError):
    def __init__(self) -> None:
        super().__init__("NOT_IN_ROOM", "connection is not in a room")


class GameNotStartedError(ResourceError):
    def __init__(self, room_code: str) -> None:
        super().__init__("GAME_NOT_STARTED", "the game has not started", {"room_id": room_code})


class GameAlreadyStartedError(TerminalStateError):
    def __init__(self, room_code: str) -> None:
        super().__init__("GAME_ALREADY_STARTED", "the game has already started", {"room_id": room_code})


class GameFinishedError(TerminalStateError):
    def __init__(self, room_code: str, winner_id: str) -> None:
        super().__init__(
            "GAME_FINISHED",
            "the game is over",
            {"room_id": room_code, "winner_id": winner_id},
        )


@dataclass(slots=True)
class Player:
    """Roster entry; only is_host ever changes."""

    connection_id: str
    display_name: str
    character_id: int
    is_host: bool = False


@dataclass(frozen=True, slots=True)
class Lobby:
    pass


@dataclass(frozen=True, slots=True)
class Active:
    engine: GameEngine


@dataclass(frozen=True, slots=True)
class Finished:
    engine: GameEngine
    winner_id: str


SessionPhase = Lobby | Active | Finished


@dataclass(slots=True)
class Session:
    """One room: roster, host and game phase."""

    code: str
    host_id: str
    players: list[Player]
    max_players: int
    phase: SessionPhase = field(default_factory=Lobby)

    @property
    def status(self) -> str:
        if isinstance(self.phase, Active):
            return "active"
        if isinstance(self.phase, Finished):
            return "finished"
        return "lobby"

    @property
    def winner_id(self) -> str | None:
        if isinstance(self.phase, Finished):
            return self.phase.winner_id
        return None

    def find_player_index(self, connection_id: str) -> int | None:
        for idx, player in enumerate(self.players):
            if player.connection_id == connection_id:
                return idx
        return None


@dataclass(slots=True)
class SessionOutcome:
    """Result of one registry operation, tagged with the room its events belong to."""

    room_code: str
    result: dict[str, Any] = field(default_factory=dict)
    events: list[OutboundEvent] = field(default_factory=list)


def normalize_room_code(room_code: str) -> str:
    return room_code.strip().upper()


class SessionRegistry:
    """Owns the room-code -> session and connection -> room-code maps.

    Map updates happen under one registry guard; each session additionally has
    its own lock so actions on one room serialize without blocking others.
    Lock order is always guard, then session.
    """

    def __init__(
        self,
        default_max_players: int = DEFAULT_MAX_PLAYERS,
        *,
        rng: random.Random | None = None,
        code_factory: Callable[[], str] | None = None,
    ) -> None:
        self._default_max_players = default_max_players
        self._rng = rng or random.Random()
        self._code_factory = code_factory or self._random_code
        self._sessions: dict[str, Session] = {}
        self._connection_rooms: dict[str, str] = {}
        self._session_locks: dict[str, threading.RLock] = {}
        self._guard = threading.RLock()

    def _random_code(self) -> str:
        return "".join(self._rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))

    def _unique_code(self) -> str:
        while True:
            code = normalize_room_code(self._code_factory())
            if code not in self._sessions:
                return code
            logger.debug("room code collision on %s, drawing again", code)

    def get(self, room_code: str) -> Session:
        """Return the live session for a code, matched case-insensitively."""
        code = normalize_room_code(room_code)
        session = self._sessions.get(code)
        if session is None:
            raise RoomNotFoundError(code)
        return session

    def list_sessions(self) -> list[Session]:
        with self._guard:
            return [self._sessions[code] for code in sorted(self._sessions)]

    def find_code_by_connection(self, connection_id: str) -> str | None:
        return self._connection_rooms.get(connection_id)

    @contextmanager
    def lock_session(self, room_code: str) -> Iterator[Session]:
        """Acquire one session write lock and yield the session."""
        with self._guard:
            session = self.get(room_code)
            lock = self._session_locks[session.code]
        with lock:
            yield session

    def _resolve_max_players(self, max_players: int | None) -> int:
        if max_players is None:
            return self._default_max_players
        if not MIN_MAX_PLAYERS <= max_players <= MAX_MAX_PLAYERS:
            raise ValidationError(
                "INVALID_MAX_PLAYERS",
                "max_players is out of range",
                {"min": MIN_MAX_PLAYERS, "max": MAX_MAX_PLAYERS, "max_players": max_players},
            )
        return max_players

    def create(
        self,
        display_name: str,
        character_id: int,
        max_players: int | None,
        requester_id: str,
    ) -> SessionOutcome:
        """Open a new room with the requester as host."""
        capacity = self._resolve_max_players(max_players)
        with self._guard:
            current = self._connection_rooms.get(requester_id)
            if current is not None:
                raise AlreadyInRoomError(current)

            code = self._unique_code()
            host = Player(
                connection_id=requester_id,
                display_name=display_name,
                character_id=character_id,
                is_host=True,
            )
            session = Session(code=code, host_id=requester_id, players=[host], max_players=capacity)
            self._sessions[code] = session
            self._session_locks[code] = threading.RLock()
            self._connection_rooms[requester_id] = code

        logger.info("room %s created by %s (%s)", code, display_name, requester_id)
        return SessionOutcome(room_code=code, result={"room_id": code, "room": room_detail(session)})

    def join(
        self,
        room_code: str,
        display_name: str,
        character_id: int,
        requester_id: str,
    ) -> SessionOutcome:
        with self._guard:
            current = self._connection_rooms.get(requester_id)
            if current is not None:
                raise AlreadyInRoomError(current)

            with self.lock_session(room_code) as session:
                if not isinstance(session.phase, Lobby):
                    raise GameAlreadyStartedError(session.code)
                if len(session.players) >= session.max_players:
                    raise RoomFullError(session.code, session.max_players)

                player = Player(
                    connection_id=requester_id,
                    display_name=display_name,
                    character_id=character_id,
                )
                session.players.append(player)
                self._connection_rooms[requester_id] = session.code

                event = to_room(
                    "player_joined",
                    {"player": player_detail(player), "player_count": len(session.players)},
                    exclude=requester_id,
                )
                result = {"room_id": session.code, "room": room_detail(session)}

        logger.info("%s (%s) joined room %s", display_name, requester_id, session.code)
        return SessionOutcome(room_code=session.code, result=result, events=[event])

    def leave(self, requester_id: str) -> SessionOutcome | None:
        """Remove a connection from its room; repeated calls for one connection are no-ops."""
        with self._guard:
            code = self._connection_rooms.pop(requester_id, None)
            if code is None or code not in self._sessions:
                return None

            with self.lock_session(code) as session:
                idx = session.find_player_index(requester_id)
                if idx is None:
                    return None
                session.players.pop(idx)

                game_events: list[OutboundEvent] = []
                if isinstance(session.phase, Active):
                    engine = session.phase.engine
                    game_events = engine.remove_player(requester_id)
                    if engine.winner_id is not None:
                        session.phase = Finished(engine=engine, winner_id=engine.winner_id)

                if not session.players:
                    del self._sessions[code]
                    del self._session_locks[code]
                    logger.info("room %s destroyed (empty)", code)
                    return SessionOutcome(room_code=code, result={"destroyed": True})

                events = [
                    to_room(
                        "player_left",
                        {"player_id": requester_id, "player_count": len(session.players)},
                    )
                ]
                if session.host_id == requester_id:
                    events.extend(self._promote_host(session))
                events.extend(game_events)

        logger.info("%s left room %s", requester_id, code)
        return SessionOutcome(room_code=code, result={"destroyed": False}, events=events)

    @staticmethod
    def _promote_host(session: Session) -> list[OutboundEvent]:
        new_host = session.players[0]
        for player in session.players:
            player.is_host = player is new_host
        session.host_id = new_host.connection_id
        logger.info("host changed in room %s to %s", session.code, new_host.connection_id)
        return [
            to_room("host_changed", {"new_host_id": new_host.connection_id}),
            to_player(new_host.connection_id, "you_are_host", {"room_id": session.code}),
        ]

    def _require_room_code(self, requester_id: str) -> str:
        code = self._connection_rooms.get(requester_id)
        if code is None:
            raise NotInRoomError()
        return code

    def start_game(self, requester_id: str) -> SessionOutcome:
        code = self._require_room_code(requester_id)
        with self.lock_session(code) as session:
            if not isinstance(session.phase, Lobby):
                raise GameAlreadyStartedError(session.code)
            require_host(session.host_id, requester_id)

            engine, events = GameEngine.start(
                [(player.connection_id, player.character_id) for player in session.players],
                rng=random.Random(self._rng.getrandbits(64)),
                roster_view=[player_detail(player) for player in session.players],
            )
            session.phase = Active(engine=engine)

        logger.info("game started in room %s with seed %s", code, engine.state.seed)
        return SessionOutcome(room_code=code, result={"room_id": code}, events=events)

    def _run_game_action(
        self,
        requester_id: str,
        action: Callable[[GameEngine], ActionOutcome],
    ) -> SessionOutcome:
        code = self._require_room_code(requester_id)
        with self.lock_session(code) as session:
            phase = session.phase
            if isinstance(phase, Lobby):
                raise GameNotStartedError(session.code)
            if isinstance(phase, Finished):
                raise GameFinishedError(session.code, phase.winner_id)

            outcome = action(phase.engine)
            for event in outcome.events:
                if event.event == "milestone_reached":
                    logger.info("room %s reached milestone %s", code, event.payload["milestone"])
            if phase.engine.winner_id is not None:
                session.phase = Finished(engine=phase.engine, winner_id=phase.engine.winner_id)
                logger.info("game over in room %s, winner %s", code, phase.engine.winner_id)

        return SessionOutcome(room_code=code, result=outcome.result, events=outcome.events)

    def end_turn(self, requester_id: str) -> SessionOutcome:
        return self._run_game_action(requester_id, lambda engine: engine.end_turn(requester_id))

    def draw_card(self, requester_id: str) -> SessionOutcome:
        return self._run_game_action(requester_id, lambda engine: engine.draw_card(requester_id))

    def play_cards(self, requester_id: str, cards: Sequence[Card]) -> SessionOutcome:
        return self._run_game_action(requester_id, lambda engine: engine.play_cards(requester_id, cards))

    def use_skill_card(self, requester_id: str, skill_id: str) -> SessionOutcome:
        return self._run_game_action(requester_id, lambda engine: engine.use_skill(requester_id, skill_id))


__all__ = [
    "Active",
    "AlreadyInRoomError",
    "Finished",
    "GameAlreadyStartedError",
    "GameFinishedError",
    "GameNotStartedError",
    "Lobby",
    "NotInRoomError",
    "Player",
    "RoomFullError",
    "RoomNotFoundError",
    "Session",
    "SessionOutcome",
    "SessionPhase",
    "SessionRegistry",
    "normalize_room_code",
]
