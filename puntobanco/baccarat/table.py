"""
Baccarat table controller.

``BaccaratTable`` owns one betting session: the immutable table state, the
round engine with its shoe, and the round history. Every user action goes
through ``StateTransitionEngine``; a rejected action never raises. It sets
the table message, publishes a ``WARNING`` event and returns a falsy value.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple

from puntobanco.common.shoe import Shoe
from puntobanco.baccarat.constants import BetType, Side
from puntobanco.baccarat.errors import BaccaratError, InsufficientBalance
from puntobanco.baccarat.game import BaccaratGame, RoundEvent, RoundEventType
from puntobanco.baccarat.history import (
    BoardPage,
    RoundHistory,
    RoundOutcome,
    paginate_columns,
)
from puntobanco.baccarat.rules import BaccaratRules
from puntobanco.events import EventBus, EngineEventType
from puntobanco.state import StateTransitionEngine, TableState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoPlaySummary:
    """Totals of one batch run."""

    rounds_requested: int
    outcomes: Tuple[RoundOutcome, ...] = field(default_factory=tuple)
    stop_reason: Optional[str] = None

    @property
    def rounds_completed(self) -> int:
        return len(self.outcomes)

    @property
    def stopped_early(self) -> bool:
        return self.rounds_completed < self.rounds_requested

    @property
    def total_wagered(self) -> int:
        return sum(o.bet_amount for o in self.outcomes)

    @property
    def total_returned(self) -> int:
        return sum(o.payout for o in self.outcomes)

    @property
    def net_result(self) -> int:
        return self.total_returned - self.total_wagered

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds_requested": self.rounds_requested,
            "rounds_completed": self.rounds_completed,
            "total_wagered": self.total_wagered,
            "total_returned": self.total_returned,
            "net_result": self.net_result,
            "stop_reason": self.stop_reason,
        }


# Round engine steps republished on the event bus
_STEP_EVENTS = {
    RoundEventType.SHUFFLE: EngineEventType.SHUFFLE,
    RoundEventType.CARD_REVEALED: EngineEventType.CARD_REVEALED,
    RoundEventType.NATURAL_DECLARED: EngineEventType.NATURAL_DECLARED,
    RoundEventType.THIRD_CARD_DRAWN: EngineEventType.THIRD_CARD_DRAWN,
    RoundEventType.SIDE_STANDS: EngineEventType.SIDE_STANDS,
}


def _started(steps: Generator) -> Generator:
    """
    Run ``steps`` up to its opening yield.

    A generator that has never been advanced skips its ``finally`` blocks
    when closed, so round generators are handed out already started.
    """
    next(steps)
    return steps


class BaccaratTable:
    """
    A single-bettor baccarat table.

    Args:
        rules: Table configuration
        rng: Random source for shuffling; pass a seeded ``random.Random``
             for a reproducible session
        shoe: Pre-built shoe, e.g. ``Shoe.from_cards`` for a stacked deal
    """

    def __init__(
        self,
        rules: Optional[BaccaratRules] = None,
        rng: Optional[random.Random] = None,
        shoe: Optional[Shoe] = None,
    ):
        self.rules = rules or BaccaratRules()
        self.game = BaccaratGame(self.rules, shoe=shoe, rng=rng)
        self.history = RoundHistory(self.rules.max_history)
        self.event_bus = EventBus.get_instance()
        self._state = TableState(balance=self.rules.initial_balance)
        self.last_outcome: Optional[RoundOutcome] = None

    @property
    def state(self) -> TableState:
        return self._state

    @property
    def shoe(self) -> Shoe:
        return self.game.shoe

    def _set_state(self, new_state: TableState) -> None:
        previous = self._state.phase
        self._state = new_state
        if new_state.phase != previous:
            self.event_bus.emit(
                EngineEventType.PHASE_CHANGED,
                {"from": previous.name, "to": new_state.phase.name},
            )

    def _reject(self, action: str, error: BaccaratError) -> bool:
        logger.debug("Rejected %s: %s", action, error)
        self._state = StateTransitionEngine.set_message(self._state, str(error))
        self.event_bus.emit(
            EngineEventType.WARNING,
            {
                "action": action,
                "reason": type(error).__name__,
                "message": str(error),
            },
        )
        return False

    def _apply(self, action: str, transition: Callable[..., TableState], *args) -> bool:
        try:
            new_state = transition(self._state, *args)
        except BaccaratError as e:
            return self._reject(action, e)
        self._set_state(new_state)
        return True

    # Betting

    def select_side(self, side: BetType) -> bool:
        """Choose the side to back. Rejected while a wager sits on another side."""
        return self._apply("select_side", StateTransitionEngine.select_side, side)

    def place_bet(self, amount: int) -> bool:
        """Add a chip to the wager on the selected side."""
        return self._apply("place_bet", StateTransitionEngine.place_bet, amount)

    def clear_bet(self) -> bool:
        return self._apply("clear_bet", StateTransitionEngine.clear_bet)

    def repeat_last_bet(self) -> bool:
        return self._apply("repeat_last_bet", StateTransitionEngine.repeat_last_bet)

    # Dealing

    def _next_round_id(self) -> str:
        return f"{self._state.id}:{self.history.next_id}"

    def start_round(self) -> Optional[Generator[RoundEvent, None, RoundOutcome]]:
        """
        Close betting and return the round as a generator of steps.

        The transition into DEALING happens immediately; the cards are only
        drawn as the generator is advanced. Closing the generator before the
        last step deals and settles the rest of the round at once. Returns
        None when the deal is rejected.
        """
        round_id = self._next_round_id()
        if not self._apply("deal", StateTransitionEngine.begin_deal, round_id):
            return None
        self.event_bus.set_context(self._state.id, round_id)
        return _started(self._play_round())

    def deal_round(self) -> Optional[RoundOutcome]:
        """
        Deal and settle one round without pausing between steps.

        Returns:
            The settled round, or None if the deal was rejected
        """
        steps = self.start_round()
        if steps is None:
            return None
        for _ in steps:
            pass
        return self.last_outcome

    def _play_round(self) -> Generator[Optional[RoundEvent], None, RoundOutcome]:
        # The first yield only marks the round as started; see _started.
        steps = self.game.deal()
        outcome = None
        try:
            yield None
            for event in steps:
                outcome = self._apply_step(event) or outcome
                yield event
        finally:
            if outcome is None:
                for event in steps:
                    outcome = self._apply_step(event) or outcome
        return outcome

    def _apply_step(self, event: RoundEvent) -> Optional[RoundOutcome]:
        if event.type in (RoundEventType.CARD_REVEALED, RoundEventType.THIRD_CARD_DRAWN):
            self._state = StateTransitionEngine.deal_card(
                self._state, Side(event.payload["side"]), event.payload["card"]
            )

        if event.type == RoundEventType.ROUND_FINISHED:
            return self._settle(event.payload["result"])

        payload = dict(event.payload)
        if "card" in payload:
            payload["card"] = payload["card"].to_dict()
        self.event_bus.emit(_STEP_EVENTS[event.type], payload)
        return None

    def _settle(self, result) -> RoundOutcome:
        bet = self._state.bet
        outcome = RoundOutcome(
            id=self.history.next_id,
            winner=result.outcome,
            player_score=result.player_value,
            banker_score=result.banker_value,
            bet_type=bet.side,
            bet_amount=bet.amount,
            payout=self.game.settle(result, bet.side, bet.amount),
            player_cards=result.player_cards,
            banker_cards=result.banker_cards,
            natural=result.is_natural,
        )
        self.history.record(outcome)
        self.last_outcome = outcome
        self._set_state(StateTransitionEngine.settle(self._state, outcome))
        logger.debug(
            "Settled round %d: %s, %s %d returned %d",
            outcome.id,
            outcome.winner.value,
            outcome.bet_type.value,
            outcome.bet_amount,
            outcome.payout,
        )
        return outcome

    def next_round(self) -> bool:
        """Leave RESULT and reopen betting."""
        return self._apply("next_round", StateTransitionEngine.next_round)

    # Batch play

    def start_auto_play(
        self, count: Optional[int] = None
    ) -> Optional[Generator[RoundEvent, None, AutoPlaySummary]]:
        """
        Lock the table and return the batch run as a generator of steps.

        Closing the generator early settles the round in progress and
        releases the table. Returns None when the run is rejected.
        """
        count = self.rules.auto_play_rounds if count is None else count
        if not self._apply("auto_play", StateTransitionEngine.start_auto_play, count):
            return None
        return _started(self._auto_play(count))

    def run_auto_play(self, count: Optional[int] = None) -> Optional[AutoPlaySummary]:
        """
        Play up to ``count`` rounds with the staked wager and side.

        The first round uses the wager already staked; each later round
        stakes it again and the run stops early once the balance cannot
        cover it.

        Returns:
            AutoPlaySummary, or None if the run was rejected
        """
        steps = self.start_auto_play(count)
        if steps is None:
            return None
        while True:
            try:
                next(steps)
            except StopIteration as stop:
                return stop.value

    def _auto_play(self, count: int) -> Generator[Optional[RoundEvent], None, AutoPlaySummary]:
        outcomes: List[RoundOutcome] = []
        stop_reason = None
        rounds_before = self.history.stats.rounds
        try:
            yield None
            for i in range(count):
                round_id = self._next_round_id()
                try:
                    self._set_state(
                        StateTransitionEngine.begin_auto_round(self._state, round_id, first=i == 0)
                    )
                except InsufficientBalance as e:
                    stop_reason = str(e)
                    logger.debug("Auto play stopped after %d rounds: %s", len(outcomes), e)
                    self.event_bus.emit(
                        EngineEventType.WARNING,
                        {"action": "auto_play", "reason": type(e).__name__, "message": str(e)},
                    )
                    break
                self.event_bus.set_context(self._state.id, round_id)
                outcome = yield from _started(self._play_round())
                outcomes.append(outcome)
        finally:
            # Includes a round settled while closing
            completed = self.history.stats.rounds - rounds_before
            self._set_state(StateTransitionEngine.finish_auto_play(self._state, completed))

        if stop_reason:
            self._state = StateTransitionEngine.set_message(
                self._state, f"{stop_reason} after {len(outcomes)} rounds"
            )
        return AutoPlaySummary(count, tuple(outcomes), stop_reason)

    # Queries

    def get_history(self, limit: Optional[int] = None) -> List[RoundOutcome]:
        """Settled rounds, newest first."""
        return self.history.get_history(limit)

    def get_streak_columns(
        self, page: Optional[int] = None, page_size: Optional[int] = None
    ) -> BoardPage:
        """
        One page of the streak board, the last page by default.
        """
        columns = self.history.streak_columns(self.rules.board_rows)
        return paginate_columns(columns, page_size or self.rules.board_columns, page)

    def get_statistics(self, window: Optional[int] = None) -> Dict[str, Any]:
        """
        Session totals plus outcome counts over the last ``window`` rounds.
        """
        return {
            "session": self.history.stats.to_dict(),
            "outcomes": self.history.window_stats(window).to_dict(),
            "balance": self._state.balance,
            "cards_remaining": self.shoe.cards_remaining,
            "penetration": self.shoe.get_penetration_percentage(),
        }

    def __repr__(self) -> str:
        return (
            f"BaccaratTable(phase={self._state.phase.name}, "
            f"balance={self._state.balance}, rounds={self.history.stats.rounds})"
        )
