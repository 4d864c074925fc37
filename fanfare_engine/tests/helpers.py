"""Shared builders for engine tests."""

from __future__ import annotations

import random

from fanfare_engine.cards import Card
from fanfare_engine.cards import Color
from fanfare_engine.core import GameEngine
from fanfare_engine.state import GameState
from fanfare_engine.state import PlayerState


class StubRandom(random.Random):
    """Random whose random() always returns a fixed roll."""

    def __init__(self, roll: float) -> None:
        self._roll = roll
        super().__init__(0)

    def random(self) -> float:
        return self._roll


NO_DROP = 0.99
ALWAYS_DROP = 0.0


def card(color: str, value: int) -> Card:
    return Card(color=Color(color), value=value)


def make_engine(
    *,
    hands: dict[str, list[Card]],
    top: Card,
    deck: list[Card] | None = None,
    characters: dict[str, int] | None = None,
    current: str | None = None,
    roll: float = NO_DROP,
) -> GameEngine:
    """Build an engine around a hand-written state; turn order follows the hands dict."""
    characters = characters or {}
    turn_order = list(hands)
    states = {
        player_id: PlayerState.for_character(characters.get(player_id, 0)) for player_id in turn_order
    }
    for player_state in states.values():
        player_state.has_had_first_turn = True
    state = GameState(
        seed=0,
        turn_order=turn_order,
        current_player_id=current or turn_order[0],
        deck=list(deck or []),
        discard_pile=[top],
        player_hands={player_id: list(cards) for player_id, cards in hands.items()},
        player_states=states,
    )
    return GameEngine(state, StubRandom(roll))
