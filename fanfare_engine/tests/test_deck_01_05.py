"""Deck generator tests: card table, LCG recurrence and seeded shuffle."""

from __future__ import annotations

from collections import Counter
import random

from fanfare_engine.cards import DECK_SIZE
from fanfare_engine.cards import Card
from fanfare_engine.cards import Color
from fanfare_engine.cards import build_deck
from fanfare_engine.cards import generate_deck
from fanfare_engine.cards import new_seed
from fanfare_engine.cards import next_seed
from fanfare_engine.cards import shuffle_deck


def test_deck_01_table_has_64_cards_with_expected_counts() -> None:
    """Input: build_deck() -> Output: 64 cards, 8/6/4/2 per colored suit, one of each grey."""
    deck = build_deck()
    counts = Counter(deck)

    assert len(deck) == DECK_SIZE == 64
    for color in (Color.RED, Color.YELLOW, Color.GREEN):
        assert [counts[Card(color, value)] for value in (3, 4, 5, 6)] == [8, 6, 4, 2]
    assert [counts[Card(Color.GREY, value)] for value in (3, 4, 5, 6)] == [1, 1, 1, 1]


def test_deck_02_lcg_matches_reference_values() -> None:
    """Input: seeds 0 then 49297 -> Output: (seed*9301+49297) mod 233280 sequence."""
    assert next_seed(0) == 49297
    assert next_seed(49297) == 165494
    assert next_seed(233279) == (233279 * 9301 + 49297) % 233280


def test_deck_03_shuffle_walks_from_last_index_carrying_seed() -> None:
    """Input: 3 distinct cards with seed 0 -> Output: swap(2,0) then j=1 for i=1."""
    cards = [Card(Color.RED, 3), Card(Color.YELLOW, 4), Card(Color.GREEN, 5)]

    shuffled = shuffle_deck(cards, seed=0)

    assert shuffled == [Card(Color.GREEN, 5), Card(Color.YELLOW, 4), Card(Color.RED, 3)]
    assert cards == [Card(Color.RED, 3), Card(Color.YELLOW, 4), Card(Color.GREEN, 5)]


def test_deck_04_same_seed_gives_identical_shuffle_and_keeps_multiset() -> None:
    """Input: generate_deck twice per seed -> Output: identical order, unchanged multiset."""
    for seed in (0, 1, 12345, 999_999):
        first = generate_deck(seed)
        second = generate_deck(seed)
        assert first == second
        assert Counter(first) == Counter(build_deck())

    assert generate_deck(1) != generate_deck(2)


def test_deck_05_new_seed_is_in_range() -> None:
    """Input: many draws from a seeded rng -> Output: every seed within [0, 1_000_000)."""
    rng = random.Random(7)
    seeds = [new_seed(rng) for _ in range(500)]
    assert all(0 <= seed < 1_000_000 for seed in seeds)
