"""Turn engine: start, end turn, draw, play, skills, departures and win detection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
import math
import random
from typing import Any

from fanfare_engine import rules
from fanfare_engine.cards import Card
from fanfare_engine.cards import Color
from fanfare_engine.cards import DECK_SIZE
from fanfare_engine.cards import generate_deck
from fanfare_engine.cards import new_seed
from fanfare_engine.characters import color_bonus
from fanfare_engine.errors import ResourceError
from fanfare_engine.errors import TerminalStateError
from fanfare_engine.errors import ValidationError
from fanfare_engine.events import OutboundEvent
from fanfare_engine.events import to_player
from fanfare_engine.events import to_room
from fanfare_engine.skills import get_skill_effect
from fanfare_engine.skills import skill_ids
from fanfare_engine.state import GameState
from fanfare_engine.state import PlayerState

MIN_PLAYERS = 2
INITIAL_HAND_SIZE = 7
# Every seat gets a full opening hand and one card is left to flip.
MAX_PLAYERS = (DECK_SIZE - 1) // INITIAL_HAND_SIZE
TURN_START_DRAW = 3
SKILL_DROP_CHANCE = 0.3
FANS_50K_THRESHOLD = 50
FANS_100K_THRESHOLD = 100
WIN_FANS = 150


@dataclass(slots=True)
class ActionOutcome:
    """Synchronous result for the actor plus the events to fan out."""

    result: dict[str, Any] = field(default_factory=dict)
    events: list[OutboundEvent] = field(default_factory=list)


def next_player_id(turn_order: Sequence[str], player_id: str) -> str:
    """Turn passes backwards through the roster, wrapping at the front."""
    idx = turn_order.index(player_id)
    count = len(turn_order)
    return turn_order[(idx - 1 + count) % count]


def card_fans(card: Card, player: PlayerState) -> int:
    fans = max(math.ceil(card.value + color_bonus(player.character_id, card.color)), 0)
    if card.color != Color.GREY:
        fans += player.equipment.get(card.color, 0)
    return fans


class GameEngine:
    """Stateful facade over one GameState.

    Every public action runs all of its checks before the first write, so a
    rejected action leaves the state untouched.
    """

    def __init__(self, state: GameState, rng: random.Random | None = None) -> None:
        self._state = state
        self._rng = rng or random.Random()
        self.winner_id: str | None = None

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def finished(self) -> bool:
        return self.winner_id is not None

    @classmethod
    def start(
        cls,
        players: Sequence[tuple[str, int]],
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        roster_view: list[dict[str, Any]] | None = None,
    ) -> tuple["GameEngine", list[OutboundEvent]]:
        """Deal a fresh game for (connection_id, character_id) pairs in roster order."""
        if len(players) < MIN_PLAYERS:
            raise ResourceError(
                "NOT_ENOUGH_PLAYERS",
                "at least two players are needed to start",
                {"player_count": len(players), "min_players": MIN_PLAYERS},
            )
        if len(players) > MAX_PLAYERS:
            raise ResourceError(
                "TOO_MANY_PLAYERS",
                "the deck cannot deal an opening hand to every player",
                {"player_count": len(players), "max_players": MAX_PLAYERS},
            )

        rng = rng or random.Random()
        if seed is None:
            seed = new_seed(rng)
        deck = generate_deck(seed)

        turn_order = [player_id for player_id, _ in players]
        hands: dict[str, list[Card]] = {}
        for player_id in turn_order:
            hands[player_id] = [deck.pop() for _ in range(INITIAL_HAND_SIZE)]
        discard_pile = [deck.pop()]

        player_states = {
            player_id: PlayerState.for_character(character_id) for player_id, character_id in players
        }
        first_player_id = turn_order[0]
        player_states[first_player_id].has_had_first_turn = True

        state = GameState(
            seed=seed,
            turn_order=turn_order,
            current_player_id=first_player_id,
            deck=deck,
            discard_pile=discard_pile,
            player_hands=hands,
            player_states=player_states,
        )
        engine = cls(state, rng)

        started_payload = {"seed": seed, **state.public_view()}
        if roster_view is not None:
            started_payload["roster"] = roster_view
        events = [to_room("game_started", started_payload)]
        for player_id in turn_order:
            events.append(to_player(player_id, "receive_hand", engine.private_view(player_id)))
        return engine, events

    def private_view(self, player_id: str) -> dict[str, Any]:
        player = self._state.player_states[player_id]
        return {
            "hand": [card.to_dict() for card in self._state.player_hands[player_id]],
            "skill_cards": dict(player.skill_cards),
            **player.to_dict(),
        }

    def _require_active(self) -> None:
        if self.finished:
            raise TerminalStateError("GAME_FINISHED", "the game is over", {"winner_id": self.winner_id})

    def _roll_skill_drop(self, player_id: str) -> list[OutboundEvent]:
        if self._rng.random() >= SKILL_DROP_CHANCE:
            return []
        available = skill_ids()
        if not available:
            return []
        skill_id = self._rng.choice(available)
        player = self._state.player_states[player_id]
        player.skill_cards[skill_id] = player.skill_cards.get(skill_id, 0) + 1
        return [
            to_player(
                player_id,
                "skill_card_received",
                {"skill_id": skill_id, "count": player.skill_cards[skill_id]},
            )
        ]

    def _begin_turn(self, player_id: str, previous_player_id: str) -> list[OutboundEvent]:
        game = self._state
        game.current_player_id = player_id
        game.batch_play_mode = False
        game.batch_color = None

        player = game.player_states[player_id]
        player.ap = max(player.max_ap - player.next_turn_ap_penalty, 0)
        player.temp_ap = 0
        player.next_turn_ap_penalty = 0
        player.skill_usage_this_turn.clear()

        drawn: list[Card] = []
        if player.has_had_first_turn:
            hand = game.player_hands[player_id]
            wanted = min(TURN_START_DRAW + player.extra_draw_count, player.max_hand_size - len(hand))
            while len(drawn) < wanted and game.deck:
                drawn.append(game.deck.pop())
            hand.extend(drawn)
        else:
            player.has_had_first_turn = True

        events = [
            to_room(
                "turn_changed",
                {
                    "current_player_id": player_id,
                    "previous_player_id": previous_player_id,
                    "ap": player.ap,
                    "max_ap": player.max_ap,
                    "deck_count": len(game.deck),
                    "hand_counts": game.hand_counts(),
                },
            )
        ]
        if drawn:
            events.append(
                to_player(
                    player_id,
                    "cards_drawn_on_turn_start",
                    {"cards": [card.to_dict() for card in drawn]},
                )
            )
            events.append(
                to_room(
                    "opponent_card_drawn",
                    {
                        "player_id": player_id,
                        "count": len(drawn),
                        "hand_count": len(game.player_hands[player_id]),
                        "deck_count": len(game.deck),
                    },
                    exclude=player_id,
                )
            )
        events.extend(self._roll_skill_drop(player_id))
        return events

    def end_turn(self, requester_id: str) -> ActionOutcome:
        self._require_active()
        rules.require_current_player(self._state, requester_id)

        upcoming = next_player_id(self._state.turn_order, requester_id)
        events = self._begin_turn(upcoming, previous_player_id=requester_id)
        return ActionOutcome(result={"current_player_id": upcoming}, events=events)

    def draw_card(self, requester_id: str) -> ActionOutcome:
        self._require_active()
        game = self._state
        rules.require_current_player(game, requester_id)
        rules.require_hand_space(game, requester_id)
        player = game.player_states[requester_id]
        rules.require_ap(player, 1)
        rules.require_deck_not_empty(game)

        card = game.deck.pop()
        game.player_hands[requester_id].append(card)
        player.spend_ap(1)

        events = [
            to_player(
                requester_id,
                "card_drawn",
                {"card": card.to_dict(), "ap": player.ap, "temp_ap": player.temp_ap},
            ),
            to_room(
                "opponent_card_drawn",
                {
                    "player_id": requester_id,
                    "count": 1,
                    "hand_count": len(game.player_hands[requester_id]),
                    "deck_count": len(game.deck),
                },
                exclude=requester_id,
            ),
        ]
        events.extend(self._roll_skill_drop(requester_id))
        return ActionOutcome(result={"card": card.to_dict()}, events=events)

    def play_cards(self, requester_id: str, cards: Sequence[Card]) -> ActionOutcome:
        self._require_active()
        game = self._state
        rules.require_current_player(game, requester_id)
        if not cards:
            raise ValidationError("EMPTY_PLAY", "select at least one card")

        hand = game.player_hands[requester_id]
        indices = rules.match_cards_in_hand(hand, cards)
        rules.require_first_card_playable(game.top_card, cards)
        player = game.player_states[requester_id]
        resulting_color = cards[-1].color
        cost = rules.play_cost(game, resulting_color)
        rules.require_ap(player, cost)

        if cost:
            player.spend_ap(cost)
            game.batch_play_mode = True
            game.batch_color = resulting_color

        played = [hand[idx] for idx in indices]
        for idx in sorted(indices, reverse=True):
            del hand[idx]
        game.discard_pile.extend(played)

        fans_gained = sum(card_fans(card, player) for card in played)
        player.fans += fans_gained

        events = [
            to_room(
                "cards_played",
                {
                    "player_id": requester_id,
                    "cards": [card.to_dict() for card in played],
                    "top_card": game.top_card.to_dict(),
                    "fans_gained": fans_gained,
                    "fans": player.fans,
                    "ap_cost": cost,
                    "ap": player.ap,
                    "temp_ap": player.temp_ap,
                    "hand_count": len(hand),
                    "batch_play_mode": game.batch_play_mode,
                    "batch_color": resulting_color.value,
                },
            )
        ]
        events.extend(self._evaluate_milestones(requester_id))
        events.extend(self._evaluate_win(requester_id))
        return ActionOutcome(
            result={"fans_gained": fans_gained, "fans": player.fans, "ap_cost": cost},
            events=events,
        )

    def use_skill(self, requester_id: str, skill_id: str) -> ActionOutcome:
        self._require_active()
        effect = get_skill_effect(skill_id)
        game = self._state
        rules.require_current_player(game, requester_id)
        player = game.player_states[requester_id]
        rules.require_ap(player, 1)
        rules.require_skill_usable(player, skill_id)

        player.spend_ap(1)
        player.skill_cards[skill_id] -= 1
        if player.skill_cards[skill_id] == 0:
            del player.skill_cards[skill_id]
        player.skill_usage_this_turn[skill_id] = player.skill_usage_this_turn.get(skill_id, 0) + 1
        effect_payload = effect(game, requester_id)

        event = to_room(
            "skill_card_used",
            {
                "player_id": requester_id,
                "skill_id": skill_id,
                "effect": effect_payload,
                "ap": player.ap,
                "temp_ap": player.temp_ap,
            },
        )
        return ActionOutcome(result={"skill_id": skill_id}, events=[event])

    def _evaluate_milestones(self, player_id: str) -> list[OutboundEvent]:
        game = self._state
        fans = game.player_states[player_id].fans
        events: list[OutboundEvent] = []

        if not game.milestones.fans50k and fans >= FANS_50K_THRESHOLD:
            game.milestones.fans50k = True
            for player in game.player_states.values():
                player.extra_draw_count += 1
                player.max_hand_size += 1
            events.append(
                to_room(
                    "milestone_reached",
                    {
                        "milestone": "fans50k",
                        "threshold": FANS_50K_THRESHOLD,
                        "triggered_by": player_id,
                        "bonus": {"extra_draw_count": 1, "max_hand_size": 1},
                    },
                )
            )

        if not game.milestones.fans100k and fans >= FANS_100K_THRESHOLD:
            game.milestones.fans100k = True
            for player in game.player_states.values():
                player.max_ap += 1
            events.append(
                to_room(
                    "milestone_reached",
                    {
                        "milestone": "fans100k",
                        "threshold": FANS_100K_THRESHOLD,
                        "triggered_by": player_id,
                        "bonus": {"max_ap": 1},
                    },
                )
            )
        return events

    def _game_over(self, winner_id: str, reason: str) -> OutboundEvent:
        self.winner_id = winner_id
        fans = {player_id: player.fans for player_id, player in self._state.player_states.items()}
        return to_room("game_over", {"winner_id": winner_id, "reason": reason, "fans": fans})

    def _evaluate_win(self, player_id: str) -> list[OutboundEvent]:
        if self._state.player_states[player_id].fans < WIN_FANS:
            return []
        return [self._game_over(player_id, reason="fans")]

    def remove_player(self, player_id: str) -> list[OutboundEvent]:
        """Drop a departed player; their hand goes under the top card and their turn auto-advances."""
        game = self._state
        if self.finished or player_id not in game.player_states:
            return []

        was_current = game.current_player_id == player_id
        upcoming = next_player_id(game.turn_order, player_id)

        hand = game.player_hands.pop(player_id)
        game.discard_pile[0:0] = hand
        del game.player_states[player_id]
        game.turn_order.remove(player_id)

        if len(game.turn_order) == 1:
            return [self._game_over(game.turn_order[0], reason="forfeit")]
        if was_current and game.turn_order:
            return self._begin_turn(upcoming, previous_player_id=player_id)
        return []


__all__ = [
    "ActionOutcome",
    "GameEngine",
    "MAX_PLAYERS",
    "card_fans",
    "next_player_id",
]
