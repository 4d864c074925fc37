"""Shared fixtures for backend tests."""

from __future__ import annotations

import importlib
import random
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from fanfare.rooms.registry import SessionRegistry


@pytest.fixture
def registry() -> SessionRegistry:
    """Registry with a seeded rng so room codes and deals are repeatable."""
    return SessionRegistry(rng=random.Random(1234))


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """TestClient around a freshly reloaded app; lifespan resets runtime state."""
    monkeypatch.setenv("FANFARE_LOG_LEVEL", "DEBUG")

    import fanfare.main as app_main

    app_main = importlib.reload(app_main)
    with TestClient(app_main.app) as test_client:
        yield test_client
