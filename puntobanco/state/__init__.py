"""
Immutable state management for a baccarat table.

This package provides the immutable table state and the pure transition
functions that move it between betting, dealing and result.
"""

from puntobanco.state.models import (
    Bet,
    TableState,
    GamePhase,
    DEFAULT_MESSAGE,
)

from puntobanco.state.transitions import StateTransitionEngine

__all__ = [
    "Bet",
    "TableState",
    "GamePhase",
    "DEFAULT_MESSAGE",
    "StateTransitionEngine",
]
