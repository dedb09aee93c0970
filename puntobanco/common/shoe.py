import logging
import random
from typing import Iterable, List, Optional

from puntobanco.common.card import Card
from puntobanco.common.deck import Deck

logger = logging.getLogger(__name__)

# A baccarat round never consumes more than six cards.
MAX_CARDS_PER_ROUND = 6

# Cut card of an eight-deck shoe. Smaller shoes cut after three quarters.
DEFAULT_CUT_CARD = 60


def default_cut_card(num_decks: int) -> int:
    """Cut card position for a shoe of ``num_decks`` decks."""
    return min(DEFAULT_CUT_CARD, num_decks * 52 // 4)


class EmptyShoe(Exception):
    """Raised when a card is drawn from a depleted shoe."""

    pass


class Shoe:
    def __init__(
        self,
        num_decks: int = 8,
        cut_card: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize a Shoe instance and build it.

        :param num_decks: Number of decks to use in the shoe (default is 8)
        :param cut_card: Remaining-card count below which the shoe must be
                         rebuilt before the next round (default is 60, or a
                         quarter of the shoe when that is smaller)
        :param rng: Random source used for shuffling. Pass a seeded
                    ``random.Random`` for reproducible shoes.
        """
        if num_decks < 1:
            raise ValueError("Number of decks must be at least 1")
        if cut_card is None:
            cut_card = default_cut_card(num_decks)
        if cut_card < 0:
            raise ValueError("Cut card position must be non-negative")
        if cut_card >= num_decks * 52:
            raise ValueError("Cut card must sit inside the shoe")

        self.num_decks = num_decks
        self.cut_card = cut_card
        self.rng = rng or random.Random()
        self.cards: List[Card] = []
        self.next_card_index = 0
        self.builds = 0
        self.discarded_count = 0
        self.stacked = False

        self.build()

    @classmethod
    def from_cards(
        cls,
        cards: Iterable[Card],
        num_decks: int = 8,
        cut_card: int = 0,
        rng: Optional[random.Random] = None,
    ) -> "Shoe":
        """
        Create a shoe that deals ``cards`` in the given order.

        The stack must hold at least ``MAX_CARDS_PER_ROUND`` cards, otherwise
        the pre-round depth check would replace it before its first card is
        dealt. Rebuilding a stacked shoe replaces it with a regular shuffled
        shoe of ``num_decks`` decks.

        :raises ValueError: if fewer than ``MAX_CARDS_PER_ROUND`` cards are given
        """
        cards = list(cards)
        if len(cards) < MAX_CARDS_PER_ROUND:
            raise ValueError(
                f"A stacked shoe needs at least {MAX_CARDS_PER_ROUND} cards, got {len(cards)}"
            )
        shoe = cls(num_decks=num_decks, cut_card=cut_card, rng=rng)
        shoe.cards = cards
        shoe.next_card_index = 0
        shoe.stacked = True
        return shoe

    @property
    def total_cards(self) -> int:
        return len(self.cards)

    def build(self):
        """Replace the shoe contents with freshly shuffled decks."""
        remaining = self.cards_remaining if self.cards else 0
        self.builds += 1
        prefix = f"{self.builds}:"

        cards: List[Card] = []
        for deck_index in range(self.num_decks):
            cards.extend(Deck(deck_index=deck_index, id_prefix=prefix).cards)

        # random.Random.shuffle is a Fisher-Yates shuffle.
        self.rng.shuffle(cards)

        self.cards = cards
        self.next_card_index = 0
        self.discarded_count += remaining
        self.stacked = False

        logger.info(
            "Built shoe #%d: %d decks, %d cards (%d discarded)",
            self.builds,
            self.num_decks,
            len(cards),
            remaining,
        )

    def draw(self) -> Card:
        """
        Remove and return the top card.

        :raises EmptyShoe: if no cards remain
        """
        if self.next_card_index >= len(self.cards):
            raise EmptyShoe(f"Shoe is empty after {len(self.cards)} cards")
        card = self.cards[self.next_card_index]
        self.next_card_index += 1
        return card

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining in the shoe."""
        return len(self.cards) - self.next_card_index

    @property
    def remaining_depth(self) -> int:
        return self.cards_remaining

    def needs_reshuffle(self) -> bool:
        """
        Whether the shoe must be rebuilt before another round is dealt.

        True once the cut card is reached, or when fewer cards remain than a
        round can consume.
        """
        remaining = self.cards_remaining
        return remaining < self.cut_card or remaining < MAX_CARDS_PER_ROUND

    def get_penetration_percentage(self) -> float:
        """Return the current penetration percentage (how far through the shoe we are)."""
        if not self.cards:
            return 0.0
        return self.next_card_index / len(self.cards)

    def __len__(self) -> int:
        return self.cards_remaining

    def __str__(self) -> str:
        return f"Shoe with {self.cards_remaining} cards remaining"

    def __repr__(self) -> str:
        return f"Shoe(num_decks={self.num_decks}, cut_card={self.cut_card}, stacked={self.stacked})"
