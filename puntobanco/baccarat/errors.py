"""
Exceptions raised by baccarat state transitions.

Transitions raise these; ``BaccaratTable`` turns the user-facing ones into a
status message and leaves its state untouched. ``EmptyShoe`` is never
reported that way: the pre-deal depth check keeps it unreachable.
"""

from puntobanco.common.shoe import EmptyShoe


class BaccaratError(Exception):
    """Base class for rejected table actions."""

    pass


class InsufficientBalance(BaccaratError):
    """Raised when a wager exceeds the available balance."""

    pass


class NoSideSelected(BaccaratError):
    """Raised when betting or dealing without a selected bet side."""

    pass


class InvalidPhaseTransition(BaccaratError):
    """Raised when an action is not legal in the current phase."""

    pass


class SideLocked(BaccaratError):
    """Raised when changing sides while a wager is staked on another side."""

    pass


class InvalidWager(BaccaratError):
    """Raised when a wager amount is not a positive whole number."""

    pass


class NothingToRepeat(BaccaratError):
    """Raised when repeating a bet that cannot be repeated."""

    pass


__all__ = [
    "BaccaratError",
    "InsufficientBalance",
    "NoSideSelected",
    "InvalidPhaseTransition",
    "SideLocked",
    "NothingToRepeat",
    "InvalidWager",
    "EmptyShoe",
]
