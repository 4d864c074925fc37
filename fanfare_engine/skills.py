"""Skill-card registry: each skill is a pure effect handler keyed by id."""

from __future__ import annotations

from typing import Any, Callable

from fanfare_engine.errors import ValidationError
from fanfare_engine.state import GameState

SkillEffect = Callable[[GameState, str], dict[str, Any]]

HATER = "HATER"
STAY_UP = "STAY_UP"

HATER_PERCENT = 10
STAY_UP_TEMP_AP = 3
STAY_UP_PENALTY = 1

_SKILL_EFFECTS: dict[str, SkillEffect] = {}


def register_skill(skill_id: str) -> Callable[[SkillEffect], SkillEffect]:
    def decorator(effect: SkillEffect) -> SkillEffect:
        if skill_id in _SKILL_EFFECTS:
            raise ValueError(f"skill {skill_id} is already registered")
        _SKILL_EFFECTS[skill_id] = effect
        return effect

    return decorator


def skill_ids() -> list[str]:
    """Registered skill ids in registration order; drop selection indexes into this."""
    return list(_SKILL_EFFECTS)


def get_skill_effect(skill_id: str) -> SkillEffect:
    effect = _SKILL_EFFECTS.get(skill_id)
    if effect is None:
        raise ValidationError("INVALID_SKILL", "unknown skill card", {"skill_id": skill_id})
    return effect


@register_skill(HATER)
def hater(game: GameState, actor_id: str) -> dict[str, Any]:
    """Every other player loses 10% of their fans, rounded down."""
    losses: dict[str, int] = {}
    for player_id, player in game.player_states.items():
        if player_id == actor_id:
            continue
        loss = player.fans * HATER_PERCENT // 100
        player.fans -= loss
        losses[player_id] = loss
    return {
        "fans_lost": losses,
        "fans": {player_id: game.player_states[player_id].fans for player_id in losses},
    }


@register_skill(STAY_UP)
def stay_up(game: GameState, actor_id: str) -> dict[str, Any]:
    player = game.player_states[actor_id]
    player.temp_ap += STAY_UP_TEMP_AP
    player.next_turn_ap_penalty += STAY_UP_PENALTY
    return {
        "temp_ap": player.temp_ap,
        "next_turn_ap_penalty": player.next_turn_ap_penalty,
    }
