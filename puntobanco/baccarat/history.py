"""
Round history, session statistics and the streak board.

The history is append-only and capped; the oldest rounds are evicted first.
Cumulative session statistics are kept alongside it and are not reduced by
eviction.

The streak board groups consecutive same-winner rounds into vertical
columns, scanning the history from oldest to newest. A run longer than the
row cap spills into a new column instead of growing past it.
"""

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from puntobanco.common.card import Card
from puntobanco.baccarat.constants import BetType, Outcome

# Trailing windows offered by the statistics view; None means all rounds.
STATS_WINDOWS = (None, 10, 50, 100)


@dataclass(frozen=True)
class RoundOutcome:
    """
    A settled round as recorded in the history.

    Attributes:
        id: Sequence number of the round within the session, starting at 1
        winner: Outcome of the round
        player_score: Final Player total
        banker_score: Final Banker total
        bet_type: Side that was backed (NONE for an observed round)
        bet_amount: Amount wagered
        payout: Total returned to the bettor, stake included
        player_cards: Cards dealt to Player
        banker_cards: Cards dealt to Banker
        natural: Whether the round ended on a natural
    """

    id: int
    winner: Outcome
    player_score: int
    banker_score: int
    bet_type: BetType = BetType.NONE
    bet_amount: int = 0
    payout: int = 0
    player_cards: Tuple[Card, ...] = ()
    banker_cards: Tuple[Card, ...] = ()
    natural: bool = False

    @property
    def profit(self) -> int:
        return self.payout - self.bet_amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "winner": self.winner.value,
            "player_score": self.player_score,
            "banker_score": self.banker_score,
            "bet_type": self.bet_type.value,
            "bet_amount": self.bet_amount,
            "payout": self.payout,
            "profit": self.profit,
            "natural": self.natural,
        }


@dataclass
class SessionStats:
    """Cumulative counters over every round of a session."""

    rounds: int = 0
    total_wagered: int = 0
    total_returned: int = 0
    player_wins: int = 0
    banker_wins: int = 0
    ties: int = 0

    def update(self, outcome: RoundOutcome) -> None:
        self.rounds += 1
        self.total_wagered += outcome.bet_amount
        self.total_returned += outcome.payout
        if outcome.winner == Outcome.PLAYER_WIN:
            self.player_wins += 1
        elif outcome.winner == Outcome.BANKER_WIN:
            self.banker_wins += 1
        else:
            self.ties += 1

    @property
    def net_result(self) -> int:
        return self.total_returned - self.total_wagered

    @property
    def return_rate(self) -> float:
        """Percentage of wagered money handed back."""
        if self.total_wagered == 0:
            return 0.0
        return self.total_returned / self.total_wagered * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds": self.rounds,
            "total_wagered": self.total_wagered,
            "total_returned": self.total_returned,
            "net_result": self.net_result,
            "return_rate": self.return_rate,
            "player_wins": self.player_wins,
            "banker_wins": self.banker_wins,
            "ties": self.ties,
        }


@dataclass(frozen=True)
class WindowStats:
    """Outcome counts and rounded percentages over a trailing window."""

    window: Optional[int]
    total: int
    player_wins: int
    banker_wins: int
    ties: int

    @property
    def player_rate(self) -> int:
        return percentage(self.player_wins, self.total)

    @property
    def banker_rate(self) -> int:
        return percentage(self.banker_wins, self.total)

    @property
    def tie_rate(self) -> int:
        return percentage(self.ties, self.total)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window": self.window,
            "total": self.total,
            "player_wins": self.player_wins,
            "banker_wins": self.banker_wins,
            "ties": self.ties,
            "player_rate": self.player_rate,
            "banker_rate": self.banker_rate,
            "tie_rate": self.tie_rate,
        }


@dataclass(frozen=True)
class StreakColumn:
    """One column of the streak board: a run of rounds with the same winner."""

    entries: Tuple[Union[Outcome, RoundOutcome], ...]

    @property
    def winner(self) -> Outcome:
        return _winner_of(self.entries[0])

    @property
    def labels(self) -> List[str]:
        return [_winner_of(entry).label for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class BoardPage:
    """A page of streak board columns."""

    page: int
    total_pages: int
    columns: Tuple[StreakColumn, ...] = field(default_factory=tuple)

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1


def percentage(count: int, total: int) -> int:
    """``count / total`` as a whole percentage, halves rounded up; 0 when empty."""
    if total == 0:
        return 0
    return (200 * count + total) // (2 * total)


def _winner_of(item: Union[Outcome, RoundOutcome]) -> Outcome:
    return item if isinstance(item, Outcome) else item.winner


def streak_columns(items: Iterable[Union[Outcome, RoundOutcome]], rows: int = 6) -> List[StreakColumn]:
    """
    Group chronologically ordered rounds into streak board columns.

    Args:
        items: Outcomes or recorded rounds, oldest first
        rows: Row cap of a column

    Returns:
        Columns in left-to-right order
    """
    if rows < 1:
        raise ValueError("rows must be at least 1")

    columns: List[StreakColumn] = []
    current: List[Union[Outcome, RoundOutcome]] = []
    current_winner: Optional[Outcome] = None

    for item in items:
        winner = _winner_of(item)
        if not current:
            current_winner = winner
            current.append(item)
        elif winner == current_winner and len(current) < rows:
            current.append(item)
        else:
            # Either the winner changed or the column is full.
            columns.append(StreakColumn(tuple(current)))
            current = [item]
            current_winner = winner

    if current:
        columns.append(StreakColumn(tuple(current)))
    return columns


def page_count(column_count: int, page_size: int) -> int:
    return max(1, math.ceil(column_count / page_size))


def paginate_columns(
    columns: Sequence[StreakColumn], page_size: int = 25, page: Optional[int] = None
) -> BoardPage:
    """
    Slice the board into pages of ``page_size`` columns.

    Args:
        columns: All board columns
        page_size: Columns per page
        page: Zero-based page; the last page when omitted. Out-of-range
              values are clamped.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    total_pages = page_count(len(columns), page_size)
    if page is None:
        page = total_pages - 1
    page = min(max(page, 0), total_pages - 1)
    start = page * page_size
    return BoardPage(
        page=page,
        total_pages=total_pages,
        columns=tuple(columns[start : start + page_size]),
    )


def window_stats(outcomes_newest_first: Sequence[RoundOutcome], window: Optional[int] = None) -> WindowStats:
    """
    Count winners over the most recent ``window`` rounds (all rounds when None).
    """
    if window is not None and window < 0:
        raise ValueError("window must be non-negative")
    recent = outcomes_newest_first if window is None else outcomes_newest_first[:window]
    winners = [_winner_of(item) for item in recent]
    return WindowStats(
        window=window,
        total=len(winners),
        player_wins=winners.count(Outcome.PLAYER_WIN),
        banker_wins=winners.count(Outcome.BANKER_WIN),
        ties=winners.count(Outcome.TIE),
    )


class RoundHistory:
    """
    Append-only, capped record of settled rounds.
    """

    def __init__(self, max_length: int = 1000):
        if max_length < 1:
            raise ValueError("max_length must be at least 1")
        self.max_length = max_length
        self._outcomes: deque = deque(maxlen=max_length)
        self.stats = SessionStats()

    @property
    def next_id(self) -> int:
        return self.stats.rounds + 1

    def record(self, outcome: RoundOutcome) -> None:
        """Append a settled round, evicting the oldest beyond the cap."""
        self._outcomes.append(outcome)
        self.stats.update(outcome)

    def get_history(self, limit: Optional[int] = None) -> List[RoundOutcome]:
        """Recorded rounds, newest first, truncated to ``limit`` entries."""
        newest_first = list(reversed(self._outcomes))
        if limit is None:
            return newest_first
        if limit < 0:
            raise ValueError("limit must be non-negative")
        return newest_first[:limit]

    def oldest_first(self) -> List[RoundOutcome]:
        return list(self._outcomes)

    def streak_columns(self, rows: int = 6) -> List[StreakColumn]:
        return streak_columns(self._outcomes, rows)

    def window_stats(self, window: Optional[int] = None) -> WindowStats:
        return window_stats(self.get_history(), window)

    def clear(self) -> None:
        self._outcomes.clear()
        self.stats = SessionStats()

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self):
        return iter(self._outcomes)
