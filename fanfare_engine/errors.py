"""Error taxonomy shared by the engine and the session registry."""

from __future__ import annotations

from typing import Any


class GameError(Exception):
    """Base class for rejected actions; nothing has been mutated when raised."""

    category = "GAME_ERROR"

    def __init__(self, code: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail or {}

    def to_payload(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }


class ValidationError(GameError):
    """Malformed or missing request fields."""

    category = "VALIDATION_ERROR"


class AuthorizationError(GameError):
    """Requester is not the host or not the current-turn player."""

    category = "AUTHORIZATION_ERROR"


class ResourceError(GameError):
    """Not enough of something: seats, cards, AP, skill uses."""

    category = "RESOURCE_ERROR"


class TerminalStateError(GameError):
    """Transition blocked because the game already started or finished."""

    category = "TERMINAL_STATE_ERROR"


__all__ = [
    "AuthorizationError",
    "GameError",
    "ResourceError",
    "TerminalStateError",
    "ValidationError",
]
