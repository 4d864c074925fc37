"""Per-character seeds and scoring modifiers."""

from __future__ import annotations

from fanfare_engine.cards import Color

BASE_MAX_AP = 3
BASE_MAX_HAND_SIZE = 10

STAMINA_CHARACTER_ID = 4
SCOUT_CHARACTER_ID = 3

_COLOR_BONUS: dict[int, dict[Color, float]] = {
    1: {Color.RED: 1.0, Color.GREEN: -0.5},
    2: {Color.YELLOW: 1.0, Color.RED: -0.5},
    3: {Color.GREEN: 0.5, Color.YELLOW: -0.5},
    4: {Color.GREY: 1.5},
}


def starting_max_ap(character_id: int) -> int:
    return BASE_MAX_AP + 1 if character_id == STAMINA_CHARACTER_ID else BASE_MAX_AP


def starting_extra_draw(character_id: int) -> int:
    return 1 if character_id == SCOUT_CHARACTER_ID else 0


def color_bonus(character_id: int, color: Color) -> float:
    """Additive modifier on a scored card's face value; unknown characters get none."""
    return _COLOR_BONUS.get(character_id, {}).get(color, 0.0)
