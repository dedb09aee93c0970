"""
Pytest configuration for tests at the root level.

This module contains fixtures shared by the whole suite: a clean event bus
for every test and a factory for stacked shoes.
"""

import random

import pytest

from puntobanco.common.card import Card, Rank, Suit
from puntobanco.common.shoe import Shoe
from puntobanco.events import EventBus

_RANKS_BY_POINT = {
    0: Rank.KING,
    1: Rank.ACE,
    2: Rank.TWO,
    3: Rank.THREE,
    4: Rank.FOUR,
    5: Rank.FIVE,
    6: Rank.SIX,
    7: Rank.SEVEN,
    8: Rank.EIGHT,
    9: Rank.NINE,
}


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


def cards_from_points(*points):
    """Cards with the given baccarat point values, in order."""
    suits = list(Suit)
    return [
        Card(suits[i % len(suits)], _RANKS_BY_POINT[point], card_id=f"stacked-{i}")
        for i, point in enumerate(points)
    ]


@pytest.fixture
def stacked_shoe():
    """
    Factory for a shoe that deals the given point values first.

    Cards are dealt Player, Banker, Player, Banker, then third cards. Pad
    with enough cards that at least six remain before each round.
    """

    def make(*points, num_decks=1, seed=0):
        return Shoe.from_cards(
            cards_from_points(*points), num_decks=num_decks, rng=random.Random(seed)
        )

    return make
