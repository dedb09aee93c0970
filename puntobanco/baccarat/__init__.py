"""
Punto Banco baccarat.

This package provides the rules engine for Punto Banco: hand evaluation, the
third-card drawing table, payouts, round history and the betting table that
ties them together.
"""

from puntobanco.baccarat.constants import BetType, Outcome, Side
from puntobanco.baccarat.game import BaccaratGame, BaccaratResult, RoundEvent, RoundEventType
from puntobanco.baccarat.hand import BaccaratHand, hand_value
from puntobanco.baccarat.history import RoundHistory, RoundOutcome, StreakColumn
from puntobanco.baccarat.payout import calculate_payout, net_profit
from puntobanco.baccarat.rules import BaccaratRules
from puntobanco.baccarat.table import AutoPlaySummary, BaccaratTable

__all__ = [
    "AutoPlaySummary",
    "BaccaratGame",
    "BaccaratHand",
    "BaccaratResult",
    "BaccaratRules",
    "BaccaratTable",
    "BetType",
    "Outcome",
    "RoundEvent",
    "RoundEventType",
    "RoundHistory",
    "RoundOutcome",
    "Side",
    "StreakColumn",
    "calculate_payout",
    "hand_value",
    "net_profit",
]
