"""Transport-free game core for fanfare sessions."""

from fanfare_engine.cards import Card
from fanfare_engine.cards import Color
from fanfare_engine.core import ActionOutcome
from fanfare_engine.core import GameEngine
from fanfare_engine.errors import AuthorizationError
from fanfare_engine.errors import GameError
from fanfare_engine.errors import ResourceError
from fanfare_engine.errors import TerminalStateError
from fanfare_engine.errors import ValidationError
from fanfare_engine.events import OutboundEvent

__all__ = [
    "ActionOutcome",
    "AuthorizationError",
    "Card",
    "Color",
    "GameEngine",
    "GameError",
    "OutboundEvent",
    "ResourceError",
    "TerminalStateError",
    "ValidationError",
]
