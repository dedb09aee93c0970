"""
Immutable state models for a baccarat table.

This module provides dataclasses for representing the state of a table
session in an immutable manner. These classes are designed to be used with
pure transition functions that create new state instances rather than
modifying existing ones.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from enum import Enum, auto
import time
import uuid

from puntobanco.common.card import Card
from puntobanco.baccarat.constants import BetType
from puntobanco.baccarat.hand import hand_value

DEFAULT_MESSAGE = "Place your bet and press DEAL"


class GamePhase(Enum):
    """
    Phases of a baccarat round.
    """

    BETTING = auto()
    DEALING = auto()
    RESULT = auto()


@dataclass(frozen=True)
class Bet:
    """
    A wager on one side of the table.

    Attributes:
        side: Side backed by the wager; NONE until one is selected
        amount: Amount staked (already debited from the balance)
    """

    side: BetType = BetType.NONE
    amount: int = 0

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Bet amount must be non-negative")

    @property
    def has_side(self) -> bool:
        return self.side != BetType.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {"side": self.side.value, "amount": self.amount}


@dataclass(frozen=True)
class TableState:
    """
    Immutable representation of a table session.

    Attributes:
        id: Unique identifier for this session
        phase: Current phase of the round
        balance: Money available to the bettor, wagers already deducted
        bet: The current wager
        last_bet: Last settled nonzero wager, offered by "repeat last bet"
        player_cards: Cards dealt to Player this round
        banker_cards: Cards dealt to Banker this round
        message: Status line describing the last action or rejection
        auto_playing: Whether a batch run holds the table
        round_id: Identifier of the round in flight or last settled
        timestamp: Time when this state was created
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    phase: GamePhase = GamePhase.BETTING
    balance: int = 10000
    bet: Bet = field(default_factory=Bet)
    last_bet: Optional[Bet] = None
    player_cards: Tuple[Card, ...] = ()
    banker_cards: Tuple[Card, ...] = ()
    message: str = DEFAULT_MESSAGE
    auto_playing: bool = False
    round_id: Optional[str] = None
    timestamp: float = field(default_factory=lambda: time.time())

    @property
    def player_value(self) -> int:
        return hand_value(self.player_cards)

    @property
    def banker_value(self) -> int:
        return hand_value(self.banker_cards)

    @property
    def accepts_bets(self) -> bool:
        return self.phase == GamePhase.BETTING and not self.auto_playing

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the table state to a dictionary suitable for serialization.
        """
        return {
            "id": self.id,
            "phase": self.phase.name,
            "balance": self.balance,
            "bet": self.bet.to_dict(),
            "last_bet": self.last_bet.to_dict() if self.last_bet else None,
            "player_cards": [card.to_dict() for card in self.player_cards],
            "banker_cards": [card.to_dict() for card in self.banker_cards],
            "message": self.message,
            "auto_playing": self.auto_playing,
            "round_id": self.round_id,
            "timestamp": self.timestamp,
        }

    def to_adapter_format(self) -> Dict[str, Any]:
        """
        Convert the table state to a format suitable for platform adapters.
        """
        return {
            "phase": self.phase.name,
            "balance": self.balance,
            "bet": self.bet.to_dict(),
            "player": {
                "cards": [str(card) for card in self.player_cards],
                "value": self.player_value,
            },
            "banker": {
                "cards": [str(card) for card in self.banker_cards],
                "value": self.banker_value,
            },
            "message": self.message,
            "auto_playing": self.auto_playing,
        }
