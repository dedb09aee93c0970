"""
Dummy adapter for the puntobanco engine, used for testing and simulation.

This module provides a non-interactive adapter that can be used for automated
testing, simulations, and benchmarks where no user interaction is needed.
"""

from typing import Any, Dict, List, Optional, Sequence, Union
from enum import Enum

from puntobanco.adapters.base import BetRequest, PlatformAdapter


class DummyAdapter(PlatformAdapter):
    """
    Dummy adapter for testing and simulation.

    Wagers are taken from ``bets`` in order; once they run out the adapter
    leaves the table. Everything rendered or notified is kept for
    inspection.
    """

    def __init__(self, bets: Optional[List[BetRequest]] = None, verbose: bool = False):
        """
        Initialize the dummy adapter.

        Args:
            bets: Wagers to answer ``request_bet`` with, in sequence
            verbose: Whether to print events to stdout (useful for debugging)
        """
        self.bets = list(bets or [])
        self.verbose = verbose

        # Track events and rendered states for later inspection
        self.events = []
        self.rendered_states = []

        self.initialized = False
        self.shut_down = False

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.shut_down = True

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Store the table state for later inspection.
        """
        self.rendered_states.append(state)

        if self.verbose:
            player = state.get("player", {})
            banker = state.get("banker", {})
            print(
                f"[{state.get('phase')}] P {player.get('cards', [])} ({player.get('value', 0)}) "
                f"B {banker.get('cards', [])} ({banker.get('value', 0)}) "
                f"balance {state.get('balance')}"
            )

    async def request_bet(
        self, state: Dict[str, Any], chip_values: Sequence[int]
    ) -> Optional[BetRequest]:
        if not self.bets:
            return None
        return self.bets.pop(0)

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Store the event for later inspection.
        """
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        self.events.append((event_type_str, data))

        if self.verbose:
            print(f"Event: {event_type_str}")
            for key, value in data.items():
                print(f"  {key}: {value}")

    def get_events_by_type(self, event_type: Union[str, Enum]) -> List[Dict[str, Any]]:
        """
        Get all events of a specific type.

        Args:
            event_type: The type of events to retrieve

        Returns:
            A list of event data dictionaries
        """
        event_type_str = event_type.name if isinstance(event_type, Enum) else event_type
        return [data for typ, data in self.events if typ == event_type_str]

    def clear(self) -> None:
        """Clear all stored events and states."""
        self.events.clear()
        self.rendered_states.clear()
