"""
This module contains the Deck class, which represents a single 52-card deck.

>>> deck = Deck()
>>> deck.size
52
>>> deck.cards[0]
Card(Suit.HEARTS, Rank.ACE)
"""

from typing import List, Union

from puntobanco.common.card import Card, Rank, Suit

SUITS = [Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES]
RANKS = list(Rank)


class Deck:
    """
    A class representing a deck of cards.

    A shoe is assembled from several decks; the deck itself never deals.
    """

    def __init__(
        self,
        cards: Union[List[Card], None] = None,
        deck_index: int = 0,
        id_prefix: str = "",
    ):
        """
        Initialize a Deck instance.

        :param cards: A list of Card instances to populate the deck (optional).
                      If not provided, a default deck will be constructed.
        :param deck_index: Position of this deck inside a multi-deck shoe,
                           folded into the card identifiers
        :param id_prefix: Extra identifier prefix, used by the shoe to keep
                          identifiers unique across rebuilds
        """
        self.deck_index = deck_index
        self.id_prefix = id_prefix
        if cards is None:
            self.cards: List[Card] = self.initialize_default_deck()
        else:
            self.cards = cards.copy()

    def initialize_default_deck(self) -> List[Card]:
        """
        Construct a default deck with all possible combinations of suits and ranks.

        :return: A list of Card instances representing the default deck.
        >>> len(Deck().cards)
        52
        """
        return [
            Card(
                suit,
                rank,
                card_id=f"{self.id_prefix}{suit.name}-{rank.value}-{self.deck_index}",
            )
            for suit in SUITS
            for rank in RANKS
        ]

    @property
    def size(self) -> int:
        """
        Return the number of cards in the deck.

        :return: The size of the deck.
        """
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Deck({[repr(card) for card in self.cards]})"

    def __str__(self) -> str:
        return f"Deck of {len(self.cards)} cards"
