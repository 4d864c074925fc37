"""Mutable game state containers."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any

from fanfare_engine.cards import Card
from fanfare_engine.cards import Color
from fanfare_engine.characters import BASE_MAX_HAND_SIZE
from fanfare_engine.characters import starting_extra_draw
from fanfare_engine.characters import starting_max_ap

EQUIPMENT_COLORS: tuple[Color, ...] = (Color.RED, Color.YELLOW, Color.GREEN)


def _empty_equipment() -> dict[Color, int]:
    return {color: 0 for color in EQUIPMENT_COLORS}


@dataclass(slots=True)
class PlayerState:
    """Per-player resource ledger."""

    character_id: int
    ap: int = 0
    max_ap: int = 0
    temp_ap: int = 0
    next_turn_ap_penalty: int = 0
    fans: int = 0
    skill_cards: dict[str, int] = field(default_factory=dict)
    skill_usage_this_turn: dict[str, int] = field(default_factory=dict)
    equipment: dict[Color, int] = field(default_factory=_empty_equipment)
    has_had_first_turn: bool = False
    max_hand_size: int = BASE_MAX_HAND_SIZE
    extra_draw_count: int = 0

    @classmethod
    def for_character(cls, character_id: int) -> "PlayerState":
        max_ap = starting_max_ap(character_id)
        return cls(
            character_id=character_id,
            ap=max_ap,
            max_ap=max_ap,
            extra_draw_count=starting_extra_draw(character_id),
        )

    @property
    def available_ap(self) -> int:
        return self.ap + self.temp_ap

    def spend_ap(self, amount: int = 1) -> None:
        """Deduct AP, consuming temp_ap first. Callers check affordability beforehand."""
        from_temp = min(self.temp_ap, amount)
        self.temp_ap -= from_temp
        self.ap -= amount - from_temp

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_id": self.character_id,
            "ap": self.ap,
            "max_ap": self.max_ap,
            "temp_ap": self.temp_ap,
            "next_turn_ap_penalty": self.next_turn_ap_penalty,
            "fans": self.fans,
            "skill_card_count": sum(self.skill_cards.values()),
            "equipment": {color.value: count for color, count in self.equipment.items()},
            "max_hand_size": self.max_hand_size,
            "extra_draw_count": self.extra_draw_count,
        }


@dataclass(slots=True)
class Milestones:
    fans50k: bool = False
    fans100k: bool = False


@dataclass(slots=True)
class GameState:
    """Authoritative state of one running game."""

    seed: int
    turn_order: list[str]
    current_player_id: str
    deck: list[Card]
    discard_pile: list[Card]
    player_hands: dict[str, list[Card]]
    player_states: dict[str, PlayerState]
    batch_play_mode: bool = False
    batch_color: Color | None = None
    milestones: Milestones = field(default_factory=Milestones)

    @property
    def top_card(self) -> Card:
        return self.discard_pile[-1]

    def card_count(self) -> int:
        return len(self.deck) + len(self.discard_pile) + sum(len(hand) for hand in self.player_hands.values())

    def hand_counts(self) -> dict[str, int]:
        return {player_id: len(self.player_hands[player_id]) for player_id in self.turn_order}

    def public_view(self) -> dict[str, Any]:
        return {
            "current_player_id": self.current_player_id,
            "turn_order": list(self.turn_order),
            "top_card": self.top_card.to_dict(),
            "deck_count": len(self.deck),
            "discard_count": len(self.discard_pile),
            "hand_counts": self.hand_counts(),
            "batch_play_mode": self.batch_play_mode,
            "batch_color": self.batch_color.value if self.batch_color is not None else None,
            "milestones": {
                "fans50k": self.milestones.fans50k,
                "fans100k": self.milestones.fans100k,
            },
            "players": {
                player_id: self.player_states[player_id].to_dict() for player_id in self.turn_order
            },
        }
