"""
Baccarat hand implementation.

In Baccarat, hand values are calculated differently than blackjack:
- Cards 2-9 are worth face value
- 10, J, Q, K are worth 0
- Aces are worth 1
- Only the rightmost digit of the sum counts (17 = 7, 23 = 3)
"""

from typing import Iterable, List

from puntobanco.common.card import Card


def hand_value(cards: Iterable[Card]) -> int:
    """
    Point total of a set of cards, modulo 10.

    >>> from puntobanco.common.card import Rank, Suit
    >>> hand_value([Card(Suit.HEARTS, Rank.NINE), Card(Suit.CLUBS, Rank.EIGHT)])
    7
    """
    return sum(card.point for card in cards) % 10


class BaccaratHand:
    """Represents a hand in Baccarat."""

    def __init__(self, cards: Iterable[Card] = ()):
        """Initialize a Baccarat hand, empty by default."""
        self.cards: List[Card] = list(cards)

    def add_card(self, card: Card) -> None:
        """
        Add a card to the hand.

        Args:
            card: Card to add
        """
        if len(self.cards) >= 3:
            raise ValueError("A baccarat hand holds at most three cards")
        self.cards.append(card)

    def value(self) -> int:
        """
        Calculate the value of the hand.

        Returns:
            Hand value (0-9)
        """
        return hand_value(self.cards)

    def is_natural(self) -> bool:
        """
        Check if this is a natural hand (8 or 9 on first two cards).

        Returns:
            True if natural, False otherwise
        """
        return len(self.cards) == 2 and self.value() in (8, 9)

    def card_count(self) -> int:
        return len(self.cards)

    def third_card_value(self) -> int:
        """
        Get the value of the third card (used for Banker drawing rules).

        Returns:
            Value of third card, or -1 if no third card
        """
        if len(self.cards) >= 3:
            return self.cards[2].point
        return -1

    def to_dict(self) -> dict:
        return {
            "cards": [card.to_dict() for card in self.cards],
            "value": self.value(),
        }

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        """String representation of the hand."""
        cards_str = ", ".join(str(card) for card in self.cards)
        return f"[{cards_str}] = {self.value()}"

    def __repr__(self) -> str:
        """Detailed representation of the hand."""
        return f"BaccaratHand(cards={self.cards}, value={self.value()})"
