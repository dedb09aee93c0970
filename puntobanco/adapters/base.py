"""
Base adapter interface for the puntobanco engine.

This module defines the interface that platform-specific adapters must implement
to present a baccarat table and collect the bettor's wagers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Tuple, Union
from enum import Enum

from puntobanco.baccarat.constants import BetType

# A bettor's choice for the next round: side and total wager (0 observes)
BetRequest = Tuple[BetType, int]


class PlatformAdapter(ABC):
    """
    Base interface for platform-specific adapters.

    This abstract class defines the methods that platform-specific adapters
    must implement to interact with the engine. These methods handle
    rendering the table state, asking the bettor for a wager, and notifying
    of table events.
    """

    @abstractmethod
    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the current table state to the platform.

        Args:
            state: The table state in adapter format (hands, balance, message)
        """
        pass

    @abstractmethod
    async def request_bet(
        self, state: Dict[str, Any], chip_values: Sequence[int]
    ) -> Optional[BetRequest]:
        """
        Ask the bettor for the next wager.

        Args:
            state: The table state in adapter format
            chip_values: Chip denominations on offer

        Returns:
            The side and amount to wager, or None to leave the table
        """
        pass

    @abstractmethod
    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the platform of a table event.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        pass

    # The following methods have default implementations but can be overridden

    async def initialize(self) -> None:
        """
        Initialize the adapter.

        This method is called when the adapter is first connected to the engine.
        """
        pass

    async def shutdown(self) -> None:
        """
        Shutdown the adapter.

        This method is called when the engine is shutting down.
        """
        pass
