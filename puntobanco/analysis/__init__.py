"""
Statistical analysis of simulated baccarat sessions.
"""

from puntobanco.analysis.statistics import (
    ConfidenceInterval,
    SessionAnalyzer,
    THEORETICAL_PROBABILITIES,
    shoe_composition_test,
    theoretical_expected_value,
)

__all__ = [
    "ConfidenceInterval",
    "SessionAnalyzer",
    "THEORETICAL_PROBABILITIES",
    "shoe_composition_test",
    "theoretical_expected_value",
]
