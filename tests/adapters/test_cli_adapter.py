"""
Tests for the console and dummy adapters.
"""

import pytest

from puntobanco.adapters import CLIAdapter, DummyAdapter, PlatformAdapter
from puntobanco.baccarat.constants import BetType
from puntobanco.common.io_interface import LoggingIOInterface, TestIOInterface
from puntobanco.events import EngineEventType

TABLE = {
    "phase": "RESULT",
    "balance": 10500,
    "bet": {"side": "banker", "amount": 500},
    "player": {"cards": ["3 of ♥", "4 of ♦"], "value": 7},
    "banker": {"cards": ["7 of ♣", "2 of ♠"], "value": 9},
    "message": "You win $500",
    "auto_playing": False,
}


@pytest.mark.asyncio
async def test_render_game_state():
    io = TestIOInterface()
    adapter = CLIAdapter(io)
    await adapter.render_game_state(TABLE)

    text = io.sent_messages[-1]
    assert "=== RESULT ===" in text
    assert "Player: 3 of ♥ 4 of ♦ (7)" in text
    assert "Banker: 7 of ♣ 2 of ♠ (9)" in text
    assert "Balance: $10,500" in text
    assert "You win $500" in text


@pytest.mark.asyncio
async def test_request_bet():
    io = TestIOInterface(["b", "250"])
    adapter = CLIAdapter(io)
    assert await adapter.request_bet(TABLE, (50, 100, 250, 500)) == (BetType.BANKER, 250)
    assert "$50, $100, $250, $500" in io.prompts[-1]


@pytest.mark.asyncio
async def test_request_bet_retries_invalid_side():
    io = TestIOInterface(["x", "tie", "0"])
    adapter = CLIAdapter(io)
    assert await adapter.request_bet(TABLE, (50,)) == (BetType.TIE, 0)
    assert "Invalid choice. Please try again." in io.sent_messages


@pytest.mark.asyncio
async def test_request_bet_quit():
    assert await CLIAdapter(TestIOInterface(["q"])).request_bet(TABLE, (50,)) is None
    assert await CLIAdapter(TestIOInterface(["x", "y", "z"])).request_bet(TABLE, (50,)) is None


@pytest.mark.asyncio
async def test_request_bet_non_numeric_amount():
    io = TestIOInterface(["p", "lots"])
    assert await CLIAdapter(io).request_bet(TABLE, (50,)) is None


@pytest.mark.asyncio
async def test_event_messages():
    io = TestIOInterface()
    adapter = CLIAdapter(io)
    card = {"rank": "9", "suit": "♠"}

    await adapter.notify_game_event(
        EngineEventType.CARD_REVEALED, {"side": "player", "card": card, "hand_value": 9}
    )
    await adapter.notify_game_event("NATURAL_DECLARED", {"sides": ["player", "banker"]})
    await adapter.notify_game_event("SIDE_STANDS", {"side": "banker", "hand_value": 6})
    await adapter.notify_game_event("MONEY_PAYOUT", {"profit": 800, "bet_amount": 100})
    await adapter.notify_game_event("MONEY_PAYOUT", {"profit": 0, "bet_amount": 100})
    await adapter.notify_game_event("MONEY_PAYOUT", {"profit": -100, "bet_amount": 100})
    await adapter.notify_game_event("WARNING", {"message": "Choose a side before betting"})
    await adapter.notify_game_event("BANKROLL_UPDATED", {"balance": 1})

    assert io.sent_messages == [
        "Player gets 9♠ (total 9)",
        "Natural for Player and Banker!",
        "Banker stands on 6",
        "You win $800",
        "Push, $100 returned",
        "You lose $100",
        "! Choose a side before betting",
    ]


@pytest.mark.asyncio
async def test_transcript_is_written_asynchronously(tmp_path):
    log_file = tmp_path / "transcript.log"
    adapter = CLIAdapter(LoggingIOInterface(str(log_file)))
    await adapter.notify_game_event("SHUFFLE", {})
    assert log_file.read_text(encoding="utf-8") == "Shuffling a new shoe...\n"


@pytest.mark.asyncio
async def test_dummy_adapter_records_everything():
    adapter = DummyAdapter(bets=[(BetType.PLAYER, 100)])
    assert isinstance(adapter, PlatformAdapter)

    await adapter.render_game_state(TABLE)
    await adapter.notify_game_event(EngineEventType.WARNING, {"message": "x"})

    assert adapter.rendered_states == [TABLE]
    assert adapter.get_events_by_type("WARNING") == [{"message": "x"}]
    assert await adapter.request_bet(TABLE, (50,)) == (BetType.PLAYER, 100)
    assert await adapter.request_bet(TABLE, (50,)) is None

    adapter.clear()
    assert adapter.events == [] and adapter.rendered_states == []
