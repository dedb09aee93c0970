"""
State transition functions for a baccarat table.

This module provides pure functions for moving a table session between
phases without modifying the original state objects. Illegal actions raise
one of the exceptions in ``puntobanco.baccarat.errors`` and never produce a
partially updated state.
"""

from dataclasses import replace

from puntobanco.common.card import Card
from puntobanco.baccarat.constants import BetType, Outcome, Side
from puntobanco.baccarat.errors import (
    InsufficientBalance,
    InvalidPhaseTransition,
    InvalidWager,
    NoSideSelected,
    NothingToRepeat,
    SideLocked,
)
from puntobanco.baccarat.history import RoundOutcome
from puntobanco.events import EventBus, EngineEventType
from puntobanco.state.models import DEFAULT_MESSAGE, GamePhase, TableState


def _require_betting(state: TableState, action: str) -> None:
    if state.auto_playing:
        raise InvalidPhaseTransition(f"Cannot {action} during auto play")
    if state.phase != GamePhase.BETTING:
        raise InvalidPhaseTransition(f"Cannot {action} during {state.phase.name}")


def _result_message(outcome: RoundOutcome) -> str:
    if outcome.bet_amount > 0:
        if outcome.profit > 0:
            return f"You win ${outcome.profit:,}"
        if outcome.profit == 0:
            return "Push - wager returned"
        return "You lose"
    match outcome.winner:
        case Outcome.PLAYER_WIN:
            return "Player wins"
        case Outcome.BANKER_WIN:
            return "Banker wins"
        case Outcome.TIE:
            return "Tie"


class StateTransitionEngine:
    """
    Pure functions for table state transitions.

    This class contains static methods that implement table transitions.
    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def select_side(state: TableState, side: BetType) -> TableState:
        """
        Choose the side the wager backs.

        Args:
            state: Current table state
            side: Side to back

        Returns:
            New state with the side selected
        """
        _require_betting(state, "change sides")
        if side == BetType.NONE:
            raise NoSideSelected("Choose Player, Banker or Tie")
        if state.bet.amount > 0 and state.bet.has_side and state.bet.side != side:
            raise SideLocked("Clear your bet before switching sides")

        new_state = replace(
            state,
            bet=replace(state.bet, side=side),
            message=f"{side.value.capitalize()} selected",
        )

        EventBus.get_instance().emit(
            EngineEventType.SIDE_SELECTED,
            {"side": side.value, "timestamp": new_state.timestamp},
        )
        return new_state

    @staticmethod
    def place_bet(state: TableState, amount: int) -> TableState:
        """
        Add ``amount`` to the wager, debiting the balance.

        Args:
            state: Current table state
            amount: Chip amount to add

        Returns:
            New state with the wager increased
        """
        _require_betting(state, "place a bet")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidWager(f"Invalid wager: {amount!r}")
        if not state.bet.has_side:
            raise NoSideSelected("Choose a side before betting")
        if amount > state.balance:
            raise InsufficientBalance(
                f"Insufficient balance: ${state.balance:,} available"
            )

        total = state.bet.amount + amount
        new_state = replace(
            state,
            balance=state.balance - amount,
            bet=replace(state.bet, amount=total),
            message=f"Bet: ${total:,}",
        )

        EventBus.get_instance().emit(
            EngineEventType.PLAYER_BET,
            {
                "side": state.bet.side.value,
                "amount": amount,
                "total": total,
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        return new_state

    @staticmethod
    def clear_bet(state: TableState) -> TableState:
        """
        Return the staked wager to the balance. The selected side is kept.
        """
        _require_betting(state, "clear the bet")

        refunded = state.bet.amount
        new_state = replace(
            state,
            balance=state.balance + refunded,
            bet=replace(state.bet, amount=0),
            message=DEFAULT_MESSAGE,
        )

        EventBus.get_instance().emit(
            EngineEventType.BET_CLEARED,
            {
                "refunded": refunded,
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        return new_state

    @staticmethod
    def repeat_last_bet(state: TableState) -> TableState:
        """
        Stake the last settled wager again, on the same side.
        """
        _require_betting(state, "repeat the bet")
        last = state.last_bet
        if last is None or last.amount == 0:
            raise NothingToRepeat("No previous bet to repeat")
        if state.bet.amount > 0:
            raise NothingToRepeat("A bet is already placed")
        if last.amount > state.balance:
            raise InsufficientBalance("Insufficient balance to repeat the bet")

        new_state = replace(
            state,
            balance=state.balance - last.amount,
            bet=last,
            message=f"Repeat: ${last.amount:,}",
        )

        EventBus.get_instance().emit(
            EngineEventType.PLAYER_BET,
            {
                "side": last.side.value,
                "amount": last.amount,
                "total": last.amount,
                "balance": new_state.balance,
                "repeat": True,
                "timestamp": new_state.timestamp,
            },
        )
        return new_state

    @staticmethod
    def begin_deal(state: TableState, round_id: str) -> TableState:
        """
        Close betting and enter the dealing phase.

        Args:
            state: Current table state
            round_id: Identifier of the round about to be dealt

        Returns:
            New state in DEALING with empty hands
        """
        _require_betting(state, "deal")
        if not state.bet.has_side:
            raise NoSideSelected("Choose a side before dealing")
        if state.balance < 0:
            raise InsufficientBalance("Balance is negative")

        return StateTransitionEngine._enter_dealing(state, round_id)

    @staticmethod
    def _enter_dealing(state: TableState, round_id: str) -> TableState:
        new_state = replace(
            state,
            phase=GamePhase.DEALING,
            player_cards=(),
            banker_cards=(),
            round_id=round_id,
            message="Dealing...",
        )

        EventBus.get_instance().emit(
            EngineEventType.ROUND_STARTED,
            {
                "round_id": round_id,
                "bet": new_state.bet.to_dict(),
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        return new_state

    @staticmethod
    def deal_card(state: TableState, side: Side, card: Card) -> TableState:
        """
        Record a card dealt to one side.
        """
        if state.phase != GamePhase.DEALING:
            raise InvalidPhaseTransition("Cards are only dealt during DEALING")
        if side == Side.PLAYER:
            return replace(state, player_cards=state.player_cards + (card,))
        return replace(state, banker_cards=state.banker_cards + (card,))

    @staticmethod
    def set_message(state: TableState, message: str) -> TableState:
        return replace(state, message=message)

    @staticmethod
    def settle(state: TableState, outcome: RoundOutcome) -> TableState:
        """
        Credit the payout and move to RESULT.

        Args:
            state: Table state in DEALING
            outcome: The settled round

        Returns:
            New state in RESULT
        """
        if state.phase != GamePhase.DEALING:
            raise InvalidPhaseTransition("Only a dealt round can be settled")

        last_bet = state.bet if state.bet.amount > 0 else state.last_bet
        new_state = replace(
            state,
            phase=GamePhase.RESULT,
            balance=state.balance + outcome.payout,
            last_bet=last_bet,
            message=_result_message(outcome),
        )

        event_bus = EventBus.get_instance()
        if outcome.bet_amount > 0:
            event_bus.emit(
                EngineEventType.MONEY_PAYOUT,
                {
                    "round_id": state.round_id,
                    "bet_type": outcome.bet_type.value,
                    "bet_amount": outcome.bet_amount,
                    "payout": outcome.payout,
                    "profit": outcome.profit,
                    "timestamp": new_state.timestamp,
                },
            )
        event_bus.emit(
            EngineEventType.BANKROLL_UPDATED,
            {"balance": new_state.balance, "timestamp": new_state.timestamp},
        )
        event_bus.emit(
            EngineEventType.ROUND_ENDED,
            {
                "round_id": state.round_id,
                "outcome": outcome.to_dict(),
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        return new_state

    @staticmethod
    def next_round(state: TableState) -> TableState:
        """
        Leave RESULT and reopen betting. The wager is cleared; the side is kept.
        """
        if state.auto_playing:
            raise InvalidPhaseTransition("Auto play is still running")
        if state.phase != GamePhase.RESULT:
            raise InvalidPhaseTransition(f"Cannot start a new round during {state.phase.name}")

        return replace(
            state,
            phase=GamePhase.BETTING,
            bet=replace(state.bet, amount=0),
            player_cards=(),
            banker_cards=(),
            message=DEFAULT_MESSAGE,
        )

    @staticmethod
    def start_auto_play(state: TableState, rounds: int) -> TableState:
        """
        Lock the table for a batch run of ``rounds`` rounds.
        """
        _require_betting(state, "start auto play")
        if rounds < 1:
            raise InvalidPhaseTransition("Auto play needs at least one round")
        if not state.bet.has_side:
            raise NoSideSelected("Choose a side before auto play")
        if state.balance < 0:
            raise InsufficientBalance("Balance is negative")

        new_state = replace(state, auto_playing=True)

        EventBus.get_instance().emit(
            EngineEventType.AUTO_PLAY_STARTED,
            {
                "rounds": rounds,
                "bet": state.bet.to_dict(),
                "balance": state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        return new_state

    @staticmethod
    def begin_auto_round(state: TableState, round_id: str, first: bool) -> TableState:
        """
        Start the next round of a batch run, re-staking the wager after the first.

        Raises:
            InsufficientBalance: when the balance cannot cover the wager again
        """
        if not state.auto_playing:
            raise InvalidPhaseTransition("Auto play is not running")
        if first:
            if state.phase != GamePhase.BETTING:
                raise InvalidPhaseTransition("Auto play must start from BETTING")
            return StateTransitionEngine._enter_dealing(state, round_id)

        if state.phase != GamePhase.RESULT:
            raise InvalidPhaseTransition("Previous auto play round has not settled")
        amount = state.bet.amount
        if amount > state.balance:
            raise InsufficientBalance("Insufficient balance - auto play stopped")
        restaked = replace(state, balance=state.balance - amount)
        return StateTransitionEngine._enter_dealing(restaked, round_id)

    @staticmethod
    def finish_auto_play(state: TableState, rounds_completed: int) -> TableState:
        """
        Release the table after a batch run.

        The phase is left as it is: RESULT after a settled round, or BETTING
        when the run ended before its first deal.
        """
        if not state.auto_playing:
            raise InvalidPhaseTransition("Auto play is not running")

        new_state = replace(
            state,
            auto_playing=False,
            message=f"{rounds_completed} rounds completed",
        )

        EventBus.get_instance().emit(
            EngineEventType.AUTO_PLAY_FINISHED,
            {
                "rounds_completed": rounds_completed,
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        return new_state
