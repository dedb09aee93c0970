"""
Statistical validation of baccarat sessions.

This module checks simulated sessions against the known properties of an
eight-deck Punto Banco game: the outcome frequencies, the expected return of
each bet, and the composition of a freshly built shoe.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import scipy.stats as stats

from puntobanco.common.card import Card, Rank
from puntobanco.baccarat.constants import BetType, Outcome
from puntobanco.baccarat.history import RoundOutcome
from puntobanco.baccarat.payout import calculate_payout
from puntobanco.baccarat.rules import BaccaratRules

# Exact outcome probabilities for eight decks
THEORETICAL_PROBABILITIES = {
    Outcome.BANKER_WIN: 0.458597,
    Outcome.PLAYER_WIN: 0.446247,
    Outcome.TIE: 0.095156,
}

# Stake used to evaluate payouts without integer truncation of commission
_UNIT = 10000


@dataclass
class ConfidenceInterval:
    """
    Represents a confidence interval with lower and upper bounds.

    Attributes:
        lower: The lower bound of the confidence interval
        upper: The upper bound of the confidence interval
        confidence: The confidence level (e.g., 0.95 for 95% confidence)
    """

    lower: float
    upper: float
    confidence: float

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def to_dict(self) -> Dict[str, float]:
        return {"lower": self.lower, "upper": self.upper, "confidence": self.confidence}


def confidence_interval(values: Sequence[float], confidence: float = 0.95) -> ConfidenceInterval:
    """
    Student-t confidence interval for the mean of ``values``.

    A sample of fewer than two values gives a zero-width interval.
    """
    if len(values) == 0:
        return ConfidenceInterval(0.0, 0.0, confidence)
    mean = float(np.mean(values))
    if len(values) < 2:
        return ConfidenceInterval(mean, mean, confidence)

    std_err = stats.sem(values)
    margin = float(std_err * stats.t.ppf((1 + confidence) / 2, len(values) - 1))
    return ConfidenceInterval(mean - margin, mean + margin, confidence)


def theoretical_expected_value(bet_type: BetType, rules: Optional[BaccaratRules] = None) -> float:
    """Expected profit per unit staked on ``bet_type``."""
    if bet_type == BetType.NONE:
        return 0.0
    rules = rules or BaccaratRules()
    return sum(
        probability * (calculate_payout(outcome, bet_type, _UNIT, rules) - _UNIT) / _UNIT
        for outcome, probability in THEORETICAL_PROBABILITIES.items()
    )


def shoe_composition_test(cards: Sequence[Card]) -> Dict[str, Any]:
    """
    Chi-square test that every rank appears equally often in ``cards``.

    A correctly built shoe holds exactly ``4 * num_decks`` cards of each rank,
    so the statistic is 0 and the p-value 1.
    """
    counts = Counter(card.rank for card in cards)
    observed = np.array([counts.get(rank, 0) for rank in Rank], dtype=float)
    if observed.sum() == 0:
        return {"chi_square": 0.0, "p_value": 1.0, "uniform": True, "total_cards": 0}

    chi_square, p_value = stats.chisquare(observed)
    return {
        "chi_square": float(chi_square),
        "p_value": float(p_value),
        "uniform": bool(np.all(observed == observed[0])),
        "total_cards": int(observed.sum()),
        "rank_counts": {rank.value: int(count) for rank, count in zip(Rank, observed)},
    }


class SessionAnalyzer:
    """
    Validates the statistical properties of a sequence of settled rounds.

    Args:
        outcomes: Settled rounds, in any order
        rules: Rules the rounds were played under
    """

    def __init__(self, outcomes: Sequence[RoundOutcome], rules: Optional[BaccaratRules] = None):
        self.outcomes = list(outcomes)
        self.rules = rules or BaccaratRules()

    def _unit_returns(self) -> List[float]:
        return [o.profit / o.bet_amount for o in self.outcomes if o.bet_amount > 0]

    def calculate_expected_value(self, bet_type: Optional[BetType] = None) -> Dict[str, Any]:
        """
        Mean profit per unit staked, with a 95% confidence interval.

        The theoretical value is reported for ``bet_type``, or for the side
        backed most often when omitted.
        """
        returns = self._unit_returns()
        if bet_type is None:
            sides = Counter(o.bet_type for o in self.outcomes if o.bet_amount > 0)
            bet_type = sides.most_common(1)[0][0] if sides else BetType.NONE

        theoretical = theoretical_expected_value(bet_type, self.rules)
        if not returns:
            return {
                "expected_value": 0.0,
                "confidence_interval": ConfidenceInterval(0.0, 0.0, 0.95).to_dict(),
                "sample_size": 0,
                "theoretical_value": theoretical,
                "deviation": 0.0,
            }

        ev = float(np.mean(returns))
        ci = confidence_interval(returns)
        return {
            "expected_value": ev,
            "confidence_interval": ci.to_dict(),
            "sample_size": len(returns),
            "theoretical_value": theoretical,
            "deviation": ev - theoretical,
            "house_edge": -ev * 100,
        }

    def calculate_variance(self) -> Dict[str, Any]:
        returns = self._unit_returns()
        if not returns:
            return {"variance": 0.0, "standard_deviation": 0.0, "sample_size": 0}
        return {
            "variance": float(np.var(returns)),
            "standard_deviation": float(np.std(returns)),
            "sample_size": len(returns),
        }

    def calculate_outcome_distribution(self) -> Dict[str, Any]:
        """
        Chi-square goodness of fit of the winners against the eight-deck odds.
        """
        total = len(self.outcomes)
        counts = Counter(o.winner for o in self.outcomes)
        order = list(THEORETICAL_PROBABILITIES)
        observed = np.array([counts.get(outcome, 0) for outcome in order], dtype=float)

        frequencies = {
            outcome.value: {
                "count": int(counts.get(outcome, 0)),
                "observed": counts.get(outcome, 0) / total if total else 0.0,
                "theoretical": THEORETICAL_PROBABILITIES[outcome],
            }
            for outcome in order
        }
        if total == 0:
            return {"frequencies": frequencies, "chi_square": 0.0, "p_value": 1.0, "sample_size": 0}

        probabilities = np.array([THEORETICAL_PROBABILITIES[o] for o in order])
        expected = probabilities / probabilities.sum() * total
        chi_square, p_value = stats.chisquare(observed, expected)
        return {
            "frequencies": frequencies,
            "chi_square": float(chi_square),
            "p_value": float(p_value),
            "sample_size": total,
        }

    def run_all_analyses(self) -> Dict[str, Any]:
        return {
            "expected_value": self.calculate_expected_value(),
            "variance": self.calculate_variance(),
            "outcome_distribution": self.calculate_outcome_distribution(),
        }
