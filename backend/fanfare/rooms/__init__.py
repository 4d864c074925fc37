"""Room domain package: session registry and intent models."""

from fanfare.rooms.models import CreateRoomRequest
from fanfare.rooms.models import JoinRoomRequest
from fanfare.rooms.models import PlayCardsRequest
from fanfare.rooms.models import UseSkillCardRequest
from fanfare.rooms.registry import Active
from fanfare.rooms.registry import Finished
from fanfare.rooms.registry import Lobby
from fanfare.rooms.registry import Player
from fanfare.rooms.registry import RoomFullError
from fanfare.rooms.registry import RoomNotFoundError
from fanfare.rooms.registry import Session
from fanfare.rooms.registry import SessionOutcome
from fanfare.rooms.registry import SessionRegistry

__all__ = [
    "Active",
    "CreateRoomRequest",
    "Finished",
    "JoinRoomRequest",
    "Lobby",
    "PlayCardsRequest",
    "Player",
    "RoomFullError",
    "RoomNotFoundError",
    "Session",
    "SessionOutcome",
    "SessionRegistry",
    "UseSkillCardRequest",
]
