"""
Baccarat engine implementation.

This module provides the BaccaratEngine class, which drives a
``BaccaratTable`` for a platform adapter. Table events published on the
event bus are forwarded to the adapter, and the reveal of each round can be
paced with ``reveal_delay`` and ``auto_play_pause``.
"""

from typing import Any, Dict, List, Optional, Tuple
import asyncio
import random
import time

from puntobanco.adapters import PlatformAdapter
from puntobanco.baccarat.constants import BetType
from puntobanco.baccarat.game import RoundEventType
from puntobanco.baccarat.rules import BaccaratRules
from puntobanco.baccarat.table import BaccaratTable
from puntobanco.engine.base import TableEngine
from puntobanco.events import EngineEventType
from puntobanco.state import TableState


class BaccaratEngine(TableEngine):
    """
    Engine implementation for Punto Banco.

    Config keys:
        rules: dict of ``BaccaratRules`` fields
        reveal_delay: seconds to wait after each dealing step (default 0)
        auto_play_pause: seconds to wait between auto play rounds (default 0)
    """

    def __init__(
        self,
        adapter: PlatformAdapter,
        config: Dict[str, Any] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the baccarat engine.

        Args:
            adapter: Platform adapter to use for rendering and input
            config: Configuration options for the table
            rng: Random source for the shoe
        """
        super().__init__(adapter, config)
        self.rules = BaccaratRules.from_dict(self.config.get("rules", {}))
        self.reveal_delay = float(self.config.get("reveal_delay", 0.0))
        self.auto_play_pause = float(self.config.get("auto_play_pause", 0.0))
        self.rng = rng
        self.table: Optional[BaccaratTable] = None

        self._pending_events: List[Tuple[str, Dict[str, Any]]] = []
        self._unsubscribe = None

    @property
    def state(self) -> Optional[TableState]:
        return self.table.state if self.table else None

    def _collect_event(self, event) -> None:
        self._pending_events.append(event)

    async def _flush_events(self) -> None:
        """Hand the events collected since the last flush to the adapter."""
        pending, self._pending_events = self._pending_events, []
        for event_type, data in pending:
            await self.adapter.notify_game_event(event_type, data)

    async def initialize(self) -> None:
        """
        Initialize the engine and start forwarding table events.
        """
        await super().initialize()
        if self._unsubscribe is None:
            self._unsubscribe = self.event_bus.on_any(self._collect_event)

        self.event_bus.emit(
            EngineEventType.ENGINE_INIT,
            {
                "engine_type": "baccarat",
                "config": self.config,
                "timestamp": time.time(),
            },
        )
        await self._flush_events()

    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        self.event_bus.emit(EngineEventType.ENGINE_SHUTDOWN, {"timestamp": time.time()})
        await self._flush_events()

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        await super().shutdown()

    async def start_game(self) -> None:
        """
        Open a new table with a fresh shoe and the initial balance.
        """
        self.table = BaccaratTable(self.rules, rng=self.rng)

        self.event_bus.emit(
            EngineEventType.GAME_STARTED,
            {
                "game_id": self.table.state.id,
                "balance": self.table.state.balance,
                "timestamp": time.time(),
            },
        )
        await self._flush_events()
        await self.render_state()

    def _require_table(self) -> BaccaratTable:
        if self.table is None:
            raise RuntimeError("start_game() must be called first")
        return self.table

    async def _after_action(self, accepted) -> Any:
        await self._flush_events()
        await self.render_state()
        return accepted

    async def select_side(self, side: BetType) -> bool:
        return await self._after_action(self._require_table().select_side(side))

    async def place_bet(self, amount: int) -> bool:
        return await self._after_action(self._require_table().place_bet(amount))

    async def clear_bet(self) -> bool:
        return await self._after_action(self._require_table().clear_bet())

    async def repeat_last_bet(self) -> bool:
        return await self._after_action(self._require_table().repeat_last_bet())

    async def next_round(self) -> bool:
        return await self._after_action(self._require_table().next_round())

    async def _run_steps(self, steps):
        """
        Advance a table generator, rendering after every step.

        The generator is closed on the way out, so a cancelled or failed
        reveal still leaves the round settled on the table.

        Returns:
            The generator's return value
        """
        try:
            while True:
                try:
                    event = next(steps)
                except StopIteration as stop:
                    await self._after_action(None)
                    return stop.value
                except Exception as e:
                    self.event_bus.emit(
                        EngineEventType.ERROR,
                        {"error": type(e).__name__, "message": str(e), "timestamp": time.time()},
                    )
                    await self._flush_events()
                    raise

                await self._flush_events()
                await self.render_state()
                if event.type == RoundEventType.ROUND_FINISHED:
                    if self.auto_play_pause and self.table.state.auto_playing:
                        await asyncio.sleep(self.auto_play_pause)
                elif self.reveal_delay:
                    await asyncio.sleep(self.reveal_delay)
        finally:
            steps.close()

    async def play_round(self) -> Optional[Dict[str, Any]]:
        """
        Deal one round, revealing each step through the adapter.

        Returns:
            The settled round as a dictionary, or None if the deal was rejected
        """
        table = self._require_table()
        steps = table.start_round()
        if steps is None:
            return await self._after_action(None)

        outcome = await self._run_steps(steps)
        return outcome.to_dict()

    async def run_auto_play(self, count: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """
        Play a batch of rounds with the staked wager.

        Returns:
            The batch summary as a dictionary, or None if the run was rejected
        """
        table = self._require_table()
        steps = table.start_auto_play(count)
        if steps is None:
            return await self._after_action(None)

        summary = await self._run_steps(steps)
        return summary.to_dict()

    async def play_interactive(self, max_rounds: Optional[int] = None) -> int:
        """
        Ask the adapter for a wager and deal, until the bettor leaves.

        Returns:
            Number of rounds dealt
        """
        table = self._require_table()
        rounds = 0
        while max_rounds is None or rounds < max_rounds:
            request = await self.adapter.request_bet(
                table.state.to_adapter_format(), self.rules.chip_values
            )
            if request is None:
                break

            side, amount = request
            if not await self.select_side(side):
                continue
            if amount > 0 and not await self.place_bet(amount):
                continue

            if await self.play_round() is not None:
                rounds += 1
                await self.next_round()
        return rounds

    def get_statistics(self, window: Optional[int] = None) -> Dict[str, Any]:
        return self._require_table().get_statistics(window)

    async def render_state(self) -> None:
        """
        Render the current table state.
        """
        if self.table is None:
            return
        await self.adapter.render_game_state(self.table.state.to_adapter_format())
