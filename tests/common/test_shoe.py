"""
Tests for the multi-deck baccarat shoe.
"""

import random
from collections import Counter

import pytest

from puntobanco.common.card import Card, Rank, Suit
from puntobanco.common.shoe import EmptyShoe, Shoe, default_cut_card


def draw_many(shoe, count):
    return [shoe.draw() for _ in range(count)]


class TestShoeBuild:
    def test_size_after_build(self):
        for decks in (1, 6, 8):
            shoe = Shoe(num_decks=decks, cut_card=0, rng=random.Random(1))
            assert shoe.total_cards == 52 * decks
            assert shoe.cards_remaining == 52 * decks

    def test_composition(self):
        shoe = Shoe(num_decks=8, rng=random.Random(1))
        counts = Counter((card.rank, card.suit) for card in shoe.cards)
        assert len(counts) == 52
        assert all(count == 8 for count in counts.values())

    def test_ids_unique_across_decks(self):
        shoe = Shoe(num_decks=8, rng=random.Random(1))
        assert len({card.id for card in shoe.cards}) == 416

    def test_ids_unique_across_rebuilds(self):
        shoe = Shoe(num_decks=1, cut_card=0, rng=random.Random(1))
        first = {card.id for card in shoe.cards}
        shoe.build()
        assert first.isdisjoint(card.id for card in shoe.cards)
        assert shoe.builds == 2

    def test_seeded_shoes_match(self):
        a = Shoe(num_decks=2, rng=random.Random(42))
        b = Shoe(num_decks=2, rng=random.Random(42))
        assert [c.id for c in a.cards] == [c.id for c in b.cards]

    def test_shuffled(self):
        shoe = Shoe(num_decks=1, cut_card=0, rng=random.Random(3))
        unshuffled = [(suit, rank) for suit in Suit for rank in Rank]
        assert [(c.suit, c.rank) for c in shoe.cards] != unshuffled

    @pytest.mark.parametrize(
        "kwargs", [{"num_decks": 0}, {"cut_card": -1}, {"num_decks": 1, "cut_card": 52}]
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            Shoe(**kwargs)


class TestShoeDrawing:
    def test_draw_decreases_remaining(self):
        shoe = Shoe(num_decks=1, cut_card=0, rng=random.Random(1))
        top = shoe.cards[0]
        assert shoe.draw() is top
        assert shoe.cards_remaining == 51
        assert shoe.remaining_depth == 51
        assert len(shoe) == 51

    def test_empty_shoe_raises(self):
        shoe = Shoe(num_decks=1, cut_card=0, rng=random.Random(1))
        draw_many(shoe, 52)
        with pytest.raises(EmptyShoe):
            shoe.draw()

    def test_draw_order_is_shoe_order(self, stacked_shoe):
        shoe = stacked_shoe(1, 2, 3, 4, 5, 6)
        assert [shoe.draw().point for _ in range(6)] == [1, 2, 3, 4, 5, 6]


class TestCutCard:
    def test_default_cut_card(self):
        assert Shoe(rng=random.Random(1)).cut_card == 60
        assert default_cut_card(8) == 60
        assert default_cut_card(2) == 26
        assert default_cut_card(1) == 13

    def test_single_deck_shoe_uses_smaller_cut_card(self):
        shoe = Shoe(num_decks=1, rng=random.Random(1))
        assert shoe.cut_card == 13
        draw_many(shoe, 39)
        assert not shoe.needs_reshuffle()
        shoe.draw()
        assert shoe.needs_reshuffle()

    def test_needs_reshuffle_below_cut_card(self):
        shoe = Shoe(num_decks=1, cut_card=20, rng=random.Random(1))
        draw_many(shoe, 32)
        assert not shoe.needs_reshuffle()
        shoe.draw()
        assert shoe.cards_remaining == 19
        assert shoe.needs_reshuffle()

    def test_needs_reshuffle_when_round_cannot_complete(self, stacked_shoe):
        shoe = stacked_shoe(1, 2, 3, 4, 5, 6)
        assert not shoe.needs_reshuffle()
        shoe.draw()
        assert shoe.needs_reshuffle()

    def test_rebuild_discards_remainder(self):
        shoe = Shoe(num_decks=1, cut_card=10, rng=random.Random(1))
        draw_many(shoe, 45)
        shoe.build()
        assert shoe.cards_remaining == 52
        assert shoe.discarded_count == 7

    def test_stacked_shoe_rebuilds_to_full_shoe(self, stacked_shoe):
        shoe = stacked_shoe(1, 2, 3, 4, 5, 6, num_decks=2)
        assert shoe.stacked
        shoe.build()
        assert not shoe.stacked
        assert shoe.total_cards == 104

    def test_stacked_shoe_shorter_than_a_round_is_rejected(self):
        with pytest.raises(ValueError, match="at least 6 cards"):
            Shoe.from_cards(
                [Card(Suit.HEARTS, rank) for rank in (Rank.EIGHT, Rank.ACE, Rank.KING, Rank.TWO)],
                num_decks=1,
            )

    def test_penetration(self):
        shoe = Shoe(num_decks=1, cut_card=0, rng=random.Random(1))
        draw_many(shoe, 13)
        assert shoe.get_penetration_percentage() == pytest.approx(0.25)
