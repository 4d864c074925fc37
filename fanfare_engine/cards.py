"""Card value objects and the seeded deck generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
import random
from typing import Any

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280
SEED_UPPER_BOUND = 1_000_000


class Color(str, Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    GREY = "grey"


@dataclass(frozen=True, slots=True)
class Card:
    """One physical card; equal cards are interchangeable."""

    color: Color
    value: int

    def to_dict(self) -> dict[str, Any]:
        return {"color": self.color.value, "value": self.value}


_DECK_TABLE: tuple[tuple[Color, int, int], ...] = (
    (Color.RED, 3, 8),
    (Color.RED, 4, 6),
    (Color.RED, 5, 4),
    (Color.RED, 6, 2),
    (Color.YELLOW, 3, 8),
    (Color.YELLOW, 4, 6),
    (Color.YELLOW, 5, 4),
    (Color.YELLOW, 6, 2),
    (Color.GREEN, 3, 8),
    (Color.GREEN, 4, 6),
    (Color.GREEN, 5, 4),
    (Color.GREEN, 6, 2),
    (Color.GREY, 3, 1),
    (Color.GREY, 4, 1),
    (Color.GREY, 5, 1),
    (Color.GREY, 6, 1),
)

DECK_SIZE = sum(count for _, _, count in _DECK_TABLE)


def build_deck() -> list[Card]:
    """Return the unshuffled deck in table order."""
    deck: list[Card] = []
    for color, value, count in _DECK_TABLE:
        deck.extend([Card(color=color, value=value)] * count)
    return deck


def new_seed(rng: random.Random) -> int:
    return rng.randrange(SEED_UPPER_BOUND)


def next_seed(seed: int) -> int:
    return (seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS


def shuffle_deck(cards: list[Card], seed: int) -> list[Card]:
    """Fisher-Yates shuffle driven by the LCG; peers with the same seed get the same order.

    The seed evolves once per swap, from the last index down to index 1.
    """
    shuffled = list(cards)
    current = int(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        current = next_seed(current)
        draw = current / LCG_MODULUS
        j = math.floor(draw * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def generate_deck(seed: int) -> list[Card]:
    return shuffle_deck(build_deck(), seed)
