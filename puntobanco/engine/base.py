"""
Base engine class for puntobanco.

This module provides the abstract base class for table engines: the async
layer that drives a table on behalf of a platform adapter.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from puntobanco.adapters import PlatformAdapter
from puntobanco.baccarat.constants import BetType
from puntobanco.events import EventBus


class TableEngine(ABC):
    """
    Abstract base class for table engines.

    This class defines the common interface for starting a session, taking
    wagers and rendering the table through an adapter.
    """

    def __init__(self, adapter: PlatformAdapter, config: Dict[str, Any] = None):
        """
        Initialize the engine.

        Args:
            adapter: Platform adapter to use for rendering and input
            config: Configuration options for the table
        """
        self.adapter = adapter
        self.config = config or {}
        self.event_bus = EventBus.get_instance()

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the engine and prepare for a session.
        """
        await self.adapter.initialize()

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        await self.adapter.shutdown()

    @abstractmethod
    async def start_game(self) -> None:
        """
        Open a new table session.
        """
        pass

    @abstractmethod
    async def select_side(self, side: BetType) -> bool:
        """
        Choose the side the wager backs.

        Returns:
            Whether the table accepted the selection
        """
        pass

    @abstractmethod
    async def place_bet(self, amount: int) -> bool:
        """
        Add a chip to the wager.

        Args:
            amount: Amount to add

        Returns:
            Whether the table accepted the wager
        """
        pass

    @abstractmethod
    async def render_state(self) -> None:
        """
        Render the current table state.
        """
        pass
