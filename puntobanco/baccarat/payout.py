"""
Payout calculation for the three baccarat bets.

Payouts are the total amount handed back to the bettor, stake included:
- Player bet: 1:1
- Banker bet: 1:1 (minus the configured commission, none by default)
- Tie bet: 8:1 (or the configured ratio)
- Player/Banker bets push on a tie
"""

import math
from typing import Optional

from puntobanco.baccarat.constants import BetType, Outcome
from puntobanco.baccarat.rules import BaccaratRules

_DEFAULT_RULES = BaccaratRules()


def calculate_payout(
    outcome: Outcome,
    bet_type: BetType,
    bet_amount: int,
    rules: Optional[BaccaratRules] = None,
) -> int:
    """
    Calculate the amount returned for a bet.

    Args:
        outcome: Outcome of the round
        bet_type: Side the wager was placed on
        bet_amount: Amount wagered
        rules: Table rules (tie ratio and banker commission)

    Returns:
        Total returned to the bettor, including the stake; 0 for a loss
    """
    if bet_amount < 0:
        raise ValueError("Bet amount must be non-negative")
    rules = rules or _DEFAULT_RULES

    match (outcome, bet_type):
        case (_, BetType.NONE):
            return 0
        case (Outcome.PLAYER_WIN, BetType.PLAYER):
            return bet_amount * 2
        case (Outcome.BANKER_WIN, BetType.BANKER):
            commission = math.floor(bet_amount * rules.banker_commission)
            return bet_amount * 2 - commission
        case (Outcome.TIE, BetType.TIE):
            return bet_amount + bet_amount * rules.tie_payout
        case (Outcome.TIE, BetType.PLAYER | BetType.BANKER):
            return bet_amount
        case (Outcome.PLAYER_WIN | Outcome.BANKER_WIN, BetType.PLAYER | BetType.BANKER | BetType.TIE):
            return 0
    raise ValueError(f"No payout rule for {outcome} / {bet_type}")


def net_profit(
    outcome: Outcome,
    bet_type: BetType,
    bet_amount: int,
    rules: Optional[BaccaratRules] = None,
) -> int:
    """Payout minus the wager; 0 when no side was backed."""
    if bet_type == BetType.NONE:
        return 0
    return calculate_payout(outcome, bet_type, bet_amount, rules) - bet_amount
