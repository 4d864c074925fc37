"""Milestone and win detection tests."""

from __future__ import annotations

import pytest

from fanfare_engine.errors import TerminalStateError
from fanfare_engine.tests.helpers import card
from fanfare_engine.tests.helpers import make_engine


def _milestones(events):
    return [event for event in events if event.event == "milestone_reached"]


def test_milestone_01_fans50k_fires_once_for_everyone() -> None:
    """Input: 47 fans + red 3 -> Output: 50 fans, one fans50k, all players +1 draw/+1 hand size."""
    engine = make_engine(
        hands={"a": [card("red", 3), card("red", 4)], "b": [], "c": []},
        top=card("red", 5),
    )
    engine.state.player_states["a"].fans = 47

    outcome = engine.play_cards("a", [card("red", 3)])

    assert engine.state.player_states["a"].fans == 50
    fired = _milestones(outcome.events)
    assert len(fired) == 1
    assert fired[0].payload["milestone"] == "fans50k"
    assert fired[0].payload["triggered_by"] == "a"
    for state in engine.state.player_states.values():
        assert state.extra_draw_count == 1
        assert state.max_hand_size == 11

    outcome = engine.play_cards("a", [card("red", 4)])
    assert _milestones(outcome.events) == []
    assert engine.state.player_states["b"].max_hand_size == 11


def test_milestone_02_second_player_crossing_does_not_refire() -> None:
    """Input: b crosses 50 after a already did -> Output: no milestone event."""
    engine = make_engine(
        hands={"a": [card("red", 3)], "b": [card("red", 4)]},
        top=card("red", 5),
    )
    engine.state.player_states["a"].fans = 49
    engine.play_cards("a", [card("red", 3)])
    engine.end_turn("a")

    engine.state.player_states["b"].fans = 48
    outcome = engine.play_cards("b", [card("red", 4)])
    assert _milestones(outcome.events) == []
    assert engine.state.player_states["b"].extra_draw_count == 1


def test_milestone_03_fans100k_grants_max_ap_once_even_after_reduction() -> None:
    """Input: cross 100, drop below, cross again -> Output: max_ap +1 exactly once."""
    engine = make_engine(
        hands={"a": [card("red", 3), card("red", 3)], "b": []},
        top=card("red", 5),
    )
    engine.state.milestones.fans50k = True
    engine.state.player_states["a"].fans = 97

    outcome = engine.play_cards("a", [card("red", 3)])
    assert [event.payload["milestone"] for event in _milestones(outcome.events)] == ["fans100k"]
    assert engine.state.player_states["a"].max_ap == 4
    assert engine.state.player_states["b"].max_ap == 4

    engine.state.player_states["a"].fans = 97
    outcome = engine.play_cards("a", [card("red", 3)])
    assert _milestones(outcome.events) == []
    assert engine.state.player_states["a"].max_ap == 4


def test_milestone_04_reaching_150_ends_the_game() -> None:
    """Input: 147 fans + red 3 -> Output: game_over naming a; further plays TerminalStateError."""
    engine = make_engine(
        hands={"a": [card("red", 3), card("red", 4)], "b": []},
        top=card("red", 5),
    )
    engine.state.milestones.fans50k = True
    engine.state.milestones.fans100k = True
    engine.state.player_states["a"].fans = 147

    outcome = engine.play_cards("a", [card("red", 3)])

    over = [event for event in outcome.events if event.event == "game_over"]
    assert len(over) == 1
    assert over[0].payload["winner_id"] == "a"
    assert over[0].payload["reason"] == "fans"
    assert engine.finished is True
    assert engine.winner_id == "a"

    with pytest.raises(TerminalStateError):
        engine.play_cards("a", [card("red", 4)])
    assert engine.state.player_hands["a"] == [card("red", 4)]


def test_milestone_05_below_threshold_has_no_effect() -> None:
    """Input: 40 fans + red 3 -> Output: no milestone, no game over."""
    engine = make_engine(hands={"a": [card("red", 3)], "b": []}, top=card("red", 5))
    engine.state.player_states["a"].fans = 40

    outcome = engine.play_cards("a", [card("red", 3)])

    assert [event.event for event in outcome.events] == ["cards_played"]
    assert engine.state.milestones.fans50k is False
