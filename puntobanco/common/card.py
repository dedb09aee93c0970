"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Hearts, Diamonds, Clubs, and Spades.

- `Rank`: An enum representing the thirteen ranks of a standard deck, Ace
through King. Each rank carries its baccarat point value (Ace is 1, two
through nine count face value, tens and court cards count 0).

- `Card`: A class representing a playing card. A card has a suit, a rank, an
identifier that is unique within the shoe it was built into, and a face-up
flag used by renderers. Suit and rank never change after construction.

This module is part of the `puntobanco` package, a baccarat rules engine.
"""

import uuid
from enum import Enum, unique
from typing import Optional


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck.
    """

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def point(self) -> int:
        """The baccarat point value of the rank."""
        match self:
            case Rank.ACE:
                return 1
            case Rank.TEN | Rank.JACK | Rank.QUEEN | Rank.KING:
                return 0
            case _:
                return int(self.value)

    @property
    def rank_str(self) -> str:
        """A string representation of the rank."""
        return self.value

    def __str__(self) -> str:
        return self.rank_str


class Card:
    """
    Class representing a playing card. This class is a member of a card deck.

    >>> card = Card(Suit.HEARTS, Rank.TWO)
    >>> print(card)
    2 of ♥
    >>> card.point
    2
    """

    __slots__ = ("suit", "rank", "id", "face_up", "str_rep")

    def __init__(
        self,
        suit: Suit,
        rank: Rank,
        card_id: Optional[str] = None,
        face_up: bool = True,
    ):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param rank: Rank of the card (one of the Rank enums)
        :param card_id: Identifier of this physical card; generated when omitted
        :param face_up: Whether the card is shown to observers
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(rank, Rank):
            raise TypeError(f"Invalid rank: {rank}")
        object.__setattr__(self, "suit", suit)
        object.__setattr__(self, "rank", rank)
        object.__setattr__(self, "id", card_id or uuid.uuid4().hex)
        object.__setattr__(self, "str_rep", f"{rank.rank_str} of {suit}")
        self.face_up = face_up

    def __setattr__(self, name, value):
        if name != "face_up":
            raise AttributeError(f"Card.{name} is read-only")
        object.__setattr__(self, name, value)

    @property
    def point(self) -> int:
        """Baccarat point value of this card."""
        return self.rank.point

    def turn_face_up(self) -> "Card":
        self.face_up = True
        return self

    def turn_face_down(self) -> "Card":
        self.face_up = False
        return self

    def to_dict(self) -> dict:
        """Serializable form handed to renderers."""
        return {
            "id": self.id,
            "suit": self.suit.value,
            "rank": self.rank.value,
            "point": self.point,
            "face_up": self.face_up,
        }

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same rank and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self.rank == other.rank and self.suit == other.suit
        return NotImplemented

    def __hash__(self):
        return hash((self.suit, self.rank))

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return self.str_rep
