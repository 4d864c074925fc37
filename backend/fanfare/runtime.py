"""Process-wide runtime state shared by REST and WebSocket handlers."""

from __future__ import annotations

from fanfare.core.config import Settings
from fanfare.core.config import load_settings
from fanfare.rooms.registry import SessionRegistry
from fanfare.ws.broadcast import ConnectionHub

settings = load_settings()
registry = SessionRegistry(default_max_players=settings.fanfare_default_max_players)
hub = ConnectionHub()


def startup() -> None:
    """Reload settings and reset in-memory sessions and connections."""
    global settings, registry, hub
    settings = load_settings()
    registry = SessionRegistry(default_max_players=settings.fanfare_default_max_players)
    hub = ConnectionHub()


__all__ = [
    "Settings",
    "hub",
    "registry",
    "settings",
    "startup",
]
