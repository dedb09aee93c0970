"""
Command-line interface adapter for the puntobanco engine.

This module provides an adapter for console-based play: the table is drawn
as text, wagers are read from the console, and the output can be redirected
to a transcript file through ``LoggingIOInterface``.
"""

from typing import Any, Dict, Optional, Sequence, Union
from enum import Enum

from puntobanco.adapters.base import BetRequest, PlatformAdapter
from puntobanco.baccarat.constants import BetType
from puntobanco.common.io_interface import ConsoleIOInterface, IOInterface

_SIDE_CHOICES = {
    "p": BetType.PLAYER,
    "player": BetType.PLAYER,
    "b": BetType.BANKER,
    "banker": BetType.BANKER,
    "t": BetType.TIE,
    "tie": BetType.TIE,
}


def _card_text(card: Dict[str, Any]) -> str:
    return f"{card.get('rank')}{card.get('suit')}"


class CLIAdapter(PlatformAdapter):
    """
    Command-line interface adapter for the puntobanco engine.
    """

    def __init__(self, io_interface: Optional[IOInterface] = None, max_attempts: int = 3):
        """
        Initialize the CLI adapter.

        Args:
            io_interface: Optional IOInterface to use for I/O. If None, a
                          console IOInterface is used.
            max_attempts: Invalid answers tolerated before leaving the table
        """
        self.io_interface = io_interface or ConsoleIOInterface()
        self.max_attempts = max_attempts

    async def _write(self, message: str) -> None:
        if hasattr(self.io_interface, "output_async"):
            await self.io_interface.output_async(message)
        else:
            self.io_interface.output(message)

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the table to the console.

        Args:
            state: The table state in adapter format
        """
        player = state.get("player", {})
        banker = state.get("banker", {})
        bet = state.get("bet", {})

        lines = ["", f"=== {state.get('phase', '')} ==="]
        if player.get("cards") or banker.get("cards"):
            lines.append(f"Player: {' '.join(player.get('cards', []))} ({player.get('value', 0)})")
            lines.append(f"Banker: {' '.join(banker.get('cards', []))} ({banker.get('value', 0)})")
        lines.append(
            f"Bet: {bet.get('side', 'none')} ${bet.get('amount', 0):,}   "
            f"Balance: ${state.get('balance', 0):,}"
        )
        if state.get("message"):
            lines.append(state["message"])
        await self._write("\n".join(lines))

    async def request_bet(
        self, state: Dict[str, Any], chip_values: Sequence[int]
    ) -> Optional[BetRequest]:
        """
        Read a side and an amount from the console.

        Returns:
            The wager, or None when the bettor quits
        """
        chips = ", ".join(f"${value:,}" for value in chip_values)
        for _ in range(self.max_attempts):
            choice = self.io_interface.input("Side [p]layer, [b]anker, [t]ie or [q]uit: ")
            choice = choice.strip().lower()
            if choice in ("q", "quit", ""):
                return None
            if choice in _SIDE_CHOICES:
                break
            await self._write("Invalid choice. Please try again.")
        else:
            return None

        for _ in range(self.max_attempts):
            try:
                amount = self.io_interface.check_numeric_response(
                    f"Wager in chips of {chips} (0 to watch): "
                )
            except ValueError:
                return None
            if amount >= 0:
                return _SIDE_CHOICES[choice], amount
            await self._write("The wager cannot be negative.")
        return None

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Print a one-line description of a table event.
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        message = self._format_event_message(event_type, data)
        if message:
            await self._write(message)

    def _format_event_message(self, event_type: str, data: Dict[str, Any]) -> Optional[str]:
        """
        Format an event message based on the event type.

        Returns:
            Formatted message string or None if no message needed
        """
        side = str(data.get("side", "")).capitalize()

        if event_type == "SHUFFLE":
            return "Shuffling a new shoe..."

        elif event_type == "CARD_REVEALED":
            return f"{side} gets {_card_text(data['card'])} (total {data.get('hand_value')})"

        elif event_type == "NATURAL_DECLARED":
            sides = " and ".join(s.capitalize() for s in data.get("sides", []))
            return f"Natural for {sides}!"

        elif event_type == "THIRD_CARD_DRAWN":
            return f"{side} draws {_card_text(data['card'])} (total {data.get('hand_value')})"

        elif event_type == "SIDE_STANDS":
            return f"{side} stands on {data.get('hand_value')}"

        elif event_type == "MONEY_PAYOUT":
            profit = data.get("profit", 0)
            if profit > 0:
                return f"You win ${profit:,}"
            elif profit == 0:
                return f"Push, ${data.get('bet_amount', 0):,} returned"
            return f"You lose ${data.get('bet_amount', 0):,}"

        elif event_type == "WARNING":
            return f"! {data.get('message')}"

        elif event_type == "AUTO_PLAY_FINISHED":
            return f"Auto play finished after {data.get('rounds_completed')} rounds"

        # Default fallback
        return None
