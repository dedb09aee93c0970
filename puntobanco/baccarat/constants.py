"""Baccarat-specific enums."""

from enum import Enum


class BetType(Enum):
    """Types of bets in Baccarat. NONE means no side has been chosen."""

    PLAYER = "player"
    BANKER = "banker"
    TIE = "tie"
    NONE = "none"


class Outcome(Enum):
    """Possible outcomes of a Baccarat round."""

    PLAYER_WIN = "player_win"
    BANKER_WIN = "banker_win"
    TIE = "tie"

    @property
    def label(self) -> str:
        """Single-letter board label."""
        return _OUTCOME_LABELS[self]


_OUTCOME_LABELS = {
    Outcome.PLAYER_WIN: "P",
    Outcome.BANKER_WIN: "B",
    Outcome.TIE: "T",
}


class Side(Enum):
    """The two hands dealt each round."""

    PLAYER = "player"
    BANKER = "banker"
