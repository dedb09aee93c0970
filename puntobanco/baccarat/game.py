"""
Baccarat game engine.

Implements the complete Baccarat round logic including dealing, drawing rules,
and outcome determination. A round is exposed as a generator of discrete
steps so that callers can reveal cards at their own pace.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generator, Optional, Tuple

from puntobanco.common.card import Card
from puntobanco.common.shoe import Shoe
from puntobanco.baccarat.constants import BetType, Outcome, Side
from puntobanco.baccarat.hand import BaccaratHand
from puntobanco.baccarat.payout import calculate_payout
from puntobanco.baccarat.rules import (
    BaccaratRules,
    banker_draws_third_card,
    player_draws_third_card,
)

logger = logging.getLogger(__name__)


class RoundEventType(Enum):
    """Steps emitted while a round is dealt."""

    SHUFFLE = "shuffle"
    CARD_REVEALED = "card_revealed"
    NATURAL_DECLARED = "natural_declared"
    THIRD_CARD_DRAWN = "third_card_drawn"
    SIDE_STANDS = "side_stands"
    ROUND_FINISHED = "round_finished"


@dataclass(frozen=True)
class RoundEvent:
    """A single observable step of a round."""

    type: RoundEventType
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BaccaratResult:
    """Result of a Baccarat round."""

    outcome: Outcome
    player_value: int
    banker_value: int
    player_cards: Tuple[Card, ...]
    banker_cards: Tuple[Card, ...]
    player_natural: bool
    banker_natural: bool

    @property
    def player_drew(self) -> bool:
        return len(self.player_cards) == 3

    @property
    def banker_drew(self) -> bool:
        return len(self.banker_cards) == 3

    @property
    def is_natural(self) -> bool:
        return self.player_natural or self.banker_natural

    @property
    def cards_used(self) -> int:
        return len(self.player_cards) + len(self.banker_cards)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "player_value": self.player_value,
            "banker_value": self.banker_value,
            "player_cards": [card.to_dict() for card in self.player_cards],
            "banker_cards": [card.to_dict() for card in self.banker_cards],
            "player_natural": self.player_natural,
            "banker_natural": self.banker_natural,
        }


def determine_outcome(player_value: int, banker_value: int) -> Outcome:
    """Higher total wins; equal totals tie."""
    if player_value > banker_value:
        return Outcome.PLAYER_WIN
    elif banker_value > player_value:
        return Outcome.BANKER_WIN
    return Outcome.TIE


class BaccaratGame:
    """
    Main Baccarat round engine.

    Handles dealing, drawing rules, and outcome determination. The engine
    owns the shoe; it never touches balances or history.
    """

    def __init__(self, rules: Optional[BaccaratRules] = None, shoe: Optional[Shoe] = None, rng=None):
        """
        Initialize a Baccarat game.

        Args:
            rules: Game rules configuration
            shoe: Card shoe (will create default if not provided)
            rng: Random source for the default shoe
        """
        self.rules = rules if rules else BaccaratRules()

        if shoe:
            self.shoe = shoe
        else:
            self.shoe = Shoe(
                num_decks=self.rules.num_decks,
                cut_card=self.rules.cut_card,
                rng=rng,
            )

        self.player_hand = BaccaratHand()
        self.banker_hand = BaccaratHand()

        # Statistics
        self.rounds_played = 0
        self.player_wins = 0
        self.banker_wins = 0
        self.ties = 0
        self.naturals = 0

    def reset_hands(self):
        """Reset hands for a new round."""
        self.player_hand = BaccaratHand()
        self.banker_hand = BaccaratHand()

    def prepare_shoe(self) -> bool:
        """
        Rebuild the shoe when the cut card has been reached.

        Returns:
            True if the shoe was rebuilt
        """
        if self.shoe.needs_reshuffle():
            self.shoe.build()
            return True
        return False

    def _draw_to(self, hand: BaccaratHand) -> Card:
        card = self.shoe.draw()
        hand.add_card(card.turn_face_up())
        return card

    def deal(self) -> Generator[RoundEvent, None, BaccaratResult]:
        """
        Deal one round, yielding each step as it happens.

        Order: optional SHUFFLE, four CARD_REVEALED steps (Player, Banker,
        Player, Banker), then either NATURAL_DECLARED or one draw/stand step
        per side, then ROUND_FINISHED carrying the result.

        Returns:
            The BaccaratResult (also carried by the final event)
        """
        self.reset_hands()

        if self.prepare_shoe():
            yield RoundEvent(
                RoundEventType.SHUFFLE,
                {"cards_remaining": self.shoe.cards_remaining, "builds": self.shoe.builds},
            )

        hands = ((Side.PLAYER, self.player_hand), (Side.BANKER, self.banker_hand))
        for position in range(2):
            for side, hand in hands:
                card = self._draw_to(hand)
                yield RoundEvent(
                    RoundEventType.CARD_REVEALED,
                    {
                        "side": side.value,
                        "card": card,
                        "position": position,
                        "hand_value": hand.value(),
                    },
                )

        if self.player_hand.is_natural() or self.banker_hand.is_natural():
            self.naturals += 1
            yield RoundEvent(
                RoundEventType.NATURAL_DECLARED,
                {
                    "sides": [side.value for side, hand in hands if hand.is_natural()],
                    "player_value": self.player_hand.value(),
                    "banker_value": self.banker_hand.value(),
                },
            )
        else:
            yield from self._apply_drawing_rules()

        result = self._finish()
        yield RoundEvent(RoundEventType.ROUND_FINISHED, {"result": result})
        return result

    def _apply_drawing_rules(self) -> Generator[RoundEvent, None, None]:
        player_drew = False
        player_third_value = -1

        if player_draws_third_card(self.player_hand.value()):
            card = self._draw_to(self.player_hand)
            player_drew = True
            player_third_value = card.point
            yield self._third_card_event(Side.PLAYER, self.player_hand, card)
        else:
            yield self._stand_event(Side.PLAYER, self.player_hand)

        if banker_draws_third_card(self.banker_hand.value(), player_drew, player_third_value):
            card = self._draw_to(self.banker_hand)
            yield self._third_card_event(Side.BANKER, self.banker_hand, card)
        else:
            yield self._stand_event(Side.BANKER, self.banker_hand)

    @staticmethod
    def _third_card_event(side: Side, hand: BaccaratHand, card: Card) -> RoundEvent:
        return RoundEvent(
            RoundEventType.THIRD_CARD_DRAWN,
            {"side": side.value, "card": card, "hand_value": hand.value()},
        )

    @staticmethod
    def _stand_event(side: Side, hand: BaccaratHand) -> RoundEvent:
        return RoundEvent(
            RoundEventType.SIDE_STANDS,
            {"side": side.value, "hand_value": hand.value()},
        )

    def _finish(self) -> BaccaratResult:
        outcome = determine_outcome(self.player_hand.value(), self.banker_hand.value())

        self.rounds_played += 1
        if outcome == Outcome.PLAYER_WIN:
            self.player_wins += 1
        elif outcome == Outcome.BANKER_WIN:
            self.banker_wins += 1
        else:
            self.ties += 1

        result = BaccaratResult(
            outcome=outcome,
            player_value=self.player_hand.value(),
            banker_value=self.banker_hand.value(),
            player_cards=tuple(self.player_hand.cards),
            banker_cards=tuple(self.banker_hand.cards),
            player_natural=self.player_hand.is_natural(),
            banker_natural=self.banker_hand.is_natural(),
        )
        logger.debug(
            "Round %d: %s (P %s / B %s)",
            self.rounds_played,
            outcome.value,
            self.player_hand,
            self.banker_hand,
        )
        return result

    def play_round(self) -> BaccaratResult:
        """
        Play a complete round of Baccarat without pausing between steps.

        Returns:
            BaccaratResult
        """
        result = None
        for event in self.deal():
            if event.type == RoundEventType.ROUND_FINISHED:
                result = event.payload["result"]
        return result

    def settle(self, result: BaccaratResult, bet_type: BetType, bet_amount: int) -> int:
        """Total returned to a bet on ``bet_type`` for ``result``."""
        return calculate_payout(result.outcome, bet_type, bet_amount, self.rules)

    def get_statistics(self) -> dict:
        """
        Get game statistics.

        Returns:
            Dictionary with statistics
        """
        total_decisive = self.player_wins + self.banker_wins

        return {
            "rounds_played": self.rounds_played,
            "player_wins": self.player_wins,
            "banker_wins": self.banker_wins,
            "ties": self.ties,
            "naturals": self.naturals,
            "player_win_rate": self.player_wins / total_decisive if total_decisive > 0 else 0,
            "banker_win_rate": self.banker_wins / total_decisive if total_decisive > 0 else 0,
            "tie_rate": self.ties / self.rounds_played if self.rounds_played > 0 else 0,
            "cards_remaining": self.shoe.cards_remaining,
        }

    def __str__(self) -> str:
        return f"Baccarat Game: {self.rounds_played} rounds played"

    def __repr__(self) -> str:
        return f"BaccaratGame(rounds={self.rounds_played}, P:{self.player_wins}, B:{self.banker_wins}, T:{self.ties})"
