"""
Tests for the base TableEngine class.
"""

import pytest

from puntobanco.adapters import DummyAdapter
from puntobanco.baccarat.constants import BetType
from puntobanco.engine.base import TableEngine
from puntobanco.events import EventBus


class MockEngine(TableEngine):
    """Minimal TableEngine implementation for testing."""

    def __init__(self, adapter, config=None):
        super().__init__(adapter, config)
        self.calls = []

    async def initialize(self):
        await super().initialize()

    async def shutdown(self):
        await super().shutdown()

    async def start_game(self):
        self.calls.append("start_game")

    async def select_side(self, side: BetType) -> bool:
        self.calls.append(("select_side", side))
        return True

    async def place_bet(self, amount: int) -> bool:
        self.calls.append(("place_bet", amount))
        return True

    async def render_state(self):
        pass


def test_cannot_instantiate_abstract_engine():
    with pytest.raises(TypeError):
        TableEngine(DummyAdapter())


def test_engine_initialization():
    adapter = DummyAdapter()
    engine = MockEngine(adapter, {"reveal_delay": 0.5})
    assert engine.adapter is adapter
    assert engine.config == {"reveal_delay": 0.5}
    assert engine.event_bus is EventBus.get_instance()
    assert MockEngine(adapter).config == {}


@pytest.mark.asyncio
async def test_lifecycle_reaches_adapter():
    adapter = DummyAdapter()
    engine = MockEngine(adapter)
    await engine.initialize()
    assert adapter.initialized
    await engine.shutdown()
    assert adapter.shut_down
