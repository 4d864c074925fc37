"""Pure rule checks; each raises on violation and never mutates state."""

from __future__ import annotations

from collections.abc import Sequence

from fanfare_engine.cards import Card
from fanfare_engine.cards import Color
from fanfare_engine.errors import AuthorizationError
from fanfare_engine.errors import ResourceError
from fanfare_engine.state import GameState
from fanfare_engine.state import PlayerState

SKILL_USES_PER_TURN = 1


def require_host(host_id: str, requester_id: str) -> None:
    if requester_id != host_id:
        raise AuthorizationError("NOT_HOST", "only the host can do this", {"host_id": host_id})


def require_current_player(game: GameState, requester_id: str) -> None:
    if requester_id != game.current_player_id:
        raise AuthorizationError(
            "NOT_YOUR_TURN",
            "it is not your turn",
            {"current_player_id": game.current_player_id},
        )


def require_ap(player: PlayerState, amount: int = 1) -> None:
    if player.available_ap < amount:
        raise ResourceError(
            "INSUFFICIENT_AP",
            "not enough action points",
            {"required": amount, "ap": player.ap, "temp_ap": player.temp_ap},
        )


def require_hand_space(game: GameState, player_id: str) -> None:
    player = game.player_states[player_id]
    if len(game.player_hands[player_id]) >= player.max_hand_size:
        raise ResourceError("HAND_FULL", "hand is full", {"max_hand_size": player.max_hand_size})


def require_deck_not_empty(game: GameState) -> None:
    if not game.deck:
        raise ResourceError("DECK_EMPTY", "the deck is empty")


def is_compatible(played: Card, top: Card) -> bool:
    """Grey on either side matches anything; otherwise color or value must match."""
    return (
        played.color == Color.GREY
        or top.color == Color.GREY
        or played.color == top.color
        or played.value == top.value
    )


def match_cards_in_hand(hand: Sequence[Card], selection: Sequence[Card]) -> list[int]:
    """Map each selected card to a distinct hand index, matching by (color, value)."""
    used: set[int] = set()
    indices: list[int] = []
    for wanted in selection:
        for idx, card in enumerate(hand):
            if idx not in used and card == wanted:
                used.add(idx)
                indices.append(idx)
                break
        else:
            raise ResourceError("CARD_NOT_IN_HAND", "card is not in hand", {"card": wanted.to_dict()})
    return indices


def require_first_card_playable(top: Card, selection: Sequence[Card]) -> None:
    """Only the opening card is gated by the top card; the rest of the play follows freely."""
    first = selection[0]
    if not is_compatible(first, top):
        raise ResourceError(
            "CARD_NOT_PLAYABLE",
            "card does not match the top card",
            {"card": first.to_dict(), "top_card": top.to_dict()},
        )


def play_cost(game: GameState, resulting_color: Color) -> int:
    """A same-color continuation of an active batch is free; anything else costs 1 AP."""
    if game.batch_play_mode and game.batch_color == resulting_color:
        return 0
    return 1


def require_skill_usable(player: PlayerState, skill_id: str) -> None:
    if player.skill_cards.get(skill_id, 0) < 1:
        raise ResourceError("SKILL_NOT_OWNED", "you do not own this skill card", {"skill_id": skill_id})
    if player.skill_usage_this_turn.get(skill_id, 0) >= SKILL_USES_PER_TURN:
        raise ResourceError(
            "SKILL_USAGE_EXCEEDED",
            "this skill card was already used this turn",
            {"skill_id": skill_id, "limit": SKILL_USES_PER_TURN},
        )
