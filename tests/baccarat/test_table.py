"""
End-to-end tests for the baccarat table controller.
"""

import random

import pytest

from puntobanco.baccarat import BaccaratRules, BaccaratTable, BetType, Outcome, RoundEventType
from puntobanco.events import EventBus
from puntobanco.state import GamePhase


@pytest.fixture
def events():
    """Every event published on the bus during the test, in order."""
    received = []
    EventBus.get_instance().on_any(received.append)
    return received


def event_names(events):
    return [name for name, _ in events]


class TestScenarios:
    def test_banker_wins_on_natural(self, stacked_shoe):
        # Player 3+4=7 stands, Banker 7+2=9 natural
        table = BaccaratTable(shoe=stacked_shoe(3, 7, 4, 2, 0, 0))
        assert table.select_side(BetType.BANKER)
        assert table.place_bet(500)
        assert table.state.balance == 9500

        outcome = table.deal_round()

        assert outcome.winner == Outcome.BANKER_WIN
        assert (outcome.player_score, outcome.banker_score) == (7, 9)
        assert outcome.natural
        assert outcome.payout == 1000
        assert outcome.profit == 500
        assert table.state.balance == 10500
        assert table.state.phase == GamePhase.RESULT

    def test_tie_bet_pays_eight_to_one(self, stacked_shoe):
        # Player 4+4=8, Banker 3+5=8
        table = BaccaratTable(shoe=stacked_shoe(4, 3, 4, 5, 0, 0))
        table.select_side(BetType.TIE)
        table.place_bet(100)

        outcome = table.deal_round()

        assert outcome.winner == Outcome.TIE
        assert outcome.payout == 900
        assert outcome.profit == 800
        assert table.state.balance == 10800

    def test_player_bet_loses(self, stacked_shoe):
        # Player 3+3=6, Banker 4+4=8 natural
        table = BaccaratTable(shoe=stacked_shoe(3, 4, 3, 4, 0, 0))
        table.select_side(BetType.PLAYER)
        table.place_bet(100)

        outcome = table.deal_round()

        assert outcome.winner == Outcome.BANKER_WIN
        assert outcome.payout == 0
        assert outcome.profit == -100
        assert table.state.balance == 9900
        assert table.state.message == "You lose"

    def test_push_returns_wager(self, stacked_shoe):
        table = BaccaratTable(shoe=stacked_shoe(4, 3, 4, 5, 0, 0))
        table.select_side(BetType.BANKER)
        table.place_bet(250)
        outcome = table.deal_round()
        assert outcome.payout == 250
        assert table.state.balance == 10000

    def test_observational_round(self, stacked_shoe):
        table = BaccaratTable(shoe=stacked_shoe(3, 4, 3, 4, 0, 0))
        table.select_side(BetType.PLAYER)
        outcome = table.deal_round()
        assert outcome.bet_amount == 0
        assert outcome.payout == 0
        assert table.state.balance == 10000
        assert table.state.last_bet is None


class TestPhases:
    def test_full_cycle(self):
        table = BaccaratTable(rng=random.Random(1))
        table.select_side(BetType.PLAYER)
        table.place_bet(100)
        table.deal_round()

        assert not table.place_bet(50)
        assert not table.select_side(BetType.BANKER)
        assert not table.clear_bet()

        assert table.next_round()
        assert table.state.phase == GamePhase.BETTING
        assert table.state.bet.side == BetType.PLAYER
        assert table.state.bet.amount == 0
        assert table.state.player_cards == ()

    def test_deal_without_side_is_rejected(self, events):
        table = BaccaratTable(rng=random.Random(1))
        assert table.deal_round() is None
        assert table.state.phase == GamePhase.BETTING
        assert table.state.message == "Choose a side before dealing"
        warning = events[-1]
        assert warning[0] == "WARNING"
        assert warning[1]["reason"] == "NoSideSelected"

    def test_rejection_leaves_state_unchanged(self):
        table = BaccaratTable(rng=random.Random(1))
        table.select_side(BetType.BANKER)
        table.place_bet(500)
        before = table.state

        assert not table.select_side(BetType.PLAYER)
        assert not table.place_bet(20000)

        after = table.state
        assert after.bet == before.bet
        assert after.balance == before.balance
        assert after.phase == before.phase
        assert after.message == "Insufficient balance: $9,500 available"

    def test_next_round_rejected_while_betting(self):
        table = BaccaratTable(rng=random.Random(1))
        assert not table.next_round()

    def test_repeat_last_bet(self, stacked_shoe):
        table = BaccaratTable(shoe=stacked_shoe(3, 4, 3, 4, 0, 0, 0, 0, 0, 0, 0, 0))
        assert not table.repeat_last_bet()
        table.select_side(BetType.BANKER)
        table.place_bet(250)
        table.deal_round()
        table.next_round()

        assert table.repeat_last_bet()
        assert table.state.bet.amount == 250
        assert not table.repeat_last_bet()

    def test_balance_never_negative(self):
        table = BaccaratTable(BaccaratRules(initial_balance=500), rng=random.Random(3))
        table.select_side(BetType.TIE)
        for _ in range(50):
            table.place_bet(100)
            table.deal_round()
            table.next_round()
            assert table.state.balance >= 0


class TestRoundSteps:
    def test_start_round_yields_steps_in_order(self, stacked_shoe):
        table = BaccaratTable(shoe=stacked_shoe(1, 2, 2, 3, 4, 6))
        table.select_side(BetType.PLAYER)
        table.place_bet(100)

        steps = table.start_round()
        assert table.state.phase == GamePhase.DEALING

        first = next(steps)
        assert first.type == RoundEventType.CARD_REVEALED
        assert len(table.state.player_cards) == 1
        assert table.state.banker_cards == ()

        remaining = list(steps)
        assert remaining[-1].type == RoundEventType.ROUND_FINISHED
        assert len(table.state.player_cards) == 3
        assert len(table.state.banker_cards) == 3
        assert table.state.phase == GamePhase.RESULT
        assert table.state.balance == 10100

    def test_events_published(self, stacked_shoe, events):
        table = BaccaratTable(shoe=stacked_shoe(3, 7, 4, 2, 0, 0))
        table.select_side(BetType.BANKER)
        table.place_bet(500)
        events.clear()
        table.deal_round()

        names = event_names(events)
        assert names[:2] == ["ROUND_STARTED", "PHASE_CHANGED"]
        assert names.count("CARD_REVEALED") == 4
        assert "NATURAL_DECLARED" in names
        assert names[-4:] == ["MONEY_PAYOUT", "BANKROLL_UPDATED", "ROUND_ENDED", "PHASE_CHANGED"]

        card_event = events[names.index("CARD_REVEALED")][1]
        assert card_event["side"] == "player"
        assert card_event["card"]["rank"] == "3"
        assert card_event["game_id"] == table.state.id

    def test_rejected_round_returns_none(self):
        table = BaccaratTable(rng=random.Random(1))
        assert table.start_round() is None


class TestAutoPlay:
    def test_runs_requested_rounds(self):
        table = BaccaratTable(rng=random.Random(4))
        table.select_side(BetType.BANKER)
        table.place_bet(100)

        summary = table.run_auto_play(10)

        assert summary.rounds_completed == 10
        assert not summary.stopped_early
        assert len(table.get_history()) == 10
        assert table.state.phase == GamePhase.RESULT
        assert not table.state.auto_playing
        assert table.state.balance == 10000 + summary.net_result
        assert summary.total_wagered == 1000

    def test_default_round_count(self):
        table = BaccaratTable(rng=random.Random(4))
        table.select_side(BetType.PLAYER)
        assert table.run_auto_play().rounds_completed == 10

    def test_stops_when_balance_runs_out(self, stacked_shoe):
        # Player 3+3=6 vs Banker 4+4=8 every round: Player bets always lose
        points = (3, 4, 3, 4) * 5 + (0, 0)
        table = BaccaratTable(BaccaratRules(initial_balance=300), shoe=stacked_shoe(*points))
        table.select_side(BetType.PLAYER)
        table.place_bet(100)

        summary = table.run_auto_play(10)

        assert summary.rounds_completed == 3
        assert summary.stopped_early
        assert summary.stop_reason
        assert table.state.balance == 0
        assert table.state.phase == GamePhase.RESULT
        assert not table.state.auto_playing
        assert table.state.message.startswith("Insufficient balance")

    def test_bets_locked_during_auto_play(self):
        table = BaccaratTable(rng=random.Random(4))
        table.select_side(BetType.BANKER)
        table.place_bet(100)

        steps = table.start_auto_play(3)
        next(steps)
        assert table.state.auto_playing
        assert not table.place_bet(100)
        assert not table.select_side(BetType.PLAYER)
        assert not table.clear_bet()
        assert not table.next_round()
        assert table.start_auto_play(3) is None

        list(steps)
        assert not table.state.auto_playing

    def test_auto_play_requires_betting_phase(self):
        table = BaccaratTable(rng=random.Random(4))
        table.select_side(BetType.BANKER)
        table.deal_round()
        assert table.run_auto_play(5) is None

    def test_events(self, events):
        table = BaccaratTable(rng=random.Random(4))
        table.select_side(BetType.BANKER)
        table.place_bet(100)
        table.run_auto_play(3)
        names = event_names(events)
        assert names.count("AUTO_PLAY_STARTED") == 1
        assert names.count("ROUND_ENDED") == 3
        assert names[-1] == "AUTO_PLAY_FINISHED"


class TestQueries:
    def test_history_and_statistics(self):
        table = BaccaratTable(rng=random.Random(9))
        table.select_side(BetType.PLAYER)
        table.place_bet(100)
        table.run_auto_play(20)

        history = table.get_history()
        assert [o.id for o in history] == list(range(20, 0, -1))
        assert len(table.get_history(5)) == 5

        stats = table.get_statistics(10)
        assert stats["session"]["rounds"] == 20
        assert stats["session"]["total_wagered"] == 2000
        assert stats["session"]["net_result"] == table.state.balance - 10000
        assert stats["outcomes"]["total"] == 10
        rates = stats["outcomes"]
        assert 98 <= rates["player_rate"] + rates["banker_rate"] + rates["tie_rate"] <= 102

    def test_streak_board(self):
        table = BaccaratTable(rng=random.Random(9))
        table.select_side(BetType.PLAYER)
        table.run_auto_play(40)

        board = table.get_streak_columns()
        assert board.page == board.total_pages - 1
        assert sum(len(c) for c in table.history.streak_columns()) == 40
        assert all(len(c) <= 6 for c in board.columns)

        small = table.get_streak_columns(page=0, page_size=2)
        assert len(small.columns) == 2


class TestAbandonedRounds:
    def test_closing_mid_round_settles_it(self, stacked_shoe):
        table = BaccaratTable(shoe=stacked_shoe(3, 7, 4, 2, 0, 0))
        table.select_side(BetType.BANKER)
        table.place_bet(500)

        steps = table.start_round()
        next(steps)
        steps.close()

        assert table.state.phase == GamePhase.RESULT
        assert table.state.balance == 10500
        assert table.last_outcome.winner == Outcome.BANKER_WIN
        assert len(table.get_history()) == 1
        assert len(table.state.banker_cards) == 2
        assert table.next_round()
        assert table.state.balance == 10500

    def test_closing_before_first_step_settles_it(self, stacked_shoe):
        table = BaccaratTable(shoe=stacked_shoe(3, 4, 3, 4, 0, 0))
        table.select_side(BetType.PLAYER)
        table.place_bet(100)

        table.start_round().close()

        assert table.state.phase == GamePhase.RESULT
        assert table.state.balance == 9900
        assert table.get_history()[0].bet_amount == 100

    def test_closing_auto_play_settles_round_in_progress(self):
        table = BaccaratTable(rng=random.Random(3))
        table.select_side(BetType.BANKER)
        table.place_bet(500)

        steps = table.start_auto_play(5)
        next(steps)
        next(steps)
        steps.close()

        history = table.get_history()
        assert len(history) == 1
        assert not table.state.auto_playing
        assert table.state.phase == GamePhase.RESULT
        assert table.state.message == "1 rounds completed"
        assert table.state.balance == 9500 + history[0].payout

        assert table.next_round()
        assert table.state.balance == 9500 + history[0].payout
        assert table.history.stats.total_wagered == 500

    def test_closing_auto_play_before_first_deal_keeps_wager(self):
        table = BaccaratTable(rng=random.Random(3))
        table.select_side(BetType.BANKER)
        table.place_bet(500)

        table.start_auto_play(3).close()

        assert table.state.phase == GamePhase.BETTING
        assert not table.state.auto_playing
        assert table.get_history() == []
        assert table.clear_bet()
        assert table.state.balance == 10000
