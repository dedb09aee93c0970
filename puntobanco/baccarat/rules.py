"""
Baccarat rules and drawing logic.

Baccarat has fixed drawing rules - no player decisions after betting.
The rules determine when Player and Banker draw a third card.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from puntobanco.common.shoe import default_cut_card


@dataclass
class BaccaratRules:
    """
    Configuration for a Baccarat table.

    Attributes:
        num_decks: Number of decks in the shoe
        cut_card: Remaining-card count below which the shoe is rebuilt
            (60 for eight decks, a quarter of smaller shoes)
        tie_payout: Payout ratio for Tie bets (8 = 8:1)
        banker_commission: Commission on Banker wins (0 = even money)
        max_history: Number of settled rounds retained in the history
        board_rows: Row cap of a streak board column
        board_columns: Streak board columns per page
        auto_play_rounds: Default number of rounds for a batch run
        initial_balance: Starting balance of a table session
        chip_values: Chip denominations offered to the bettor
    """

    num_decks: int = 8
    cut_card: Optional[int] = None
    tie_payout: int = 8
    banker_commission: float = 0.0
    max_history: int = 1000
    board_rows: int = 6
    board_columns: int = 25
    auto_play_rounds: int = 10
    initial_balance: int = 10000
    chip_values: Tuple[int, ...] = (50, 100, 250, 500)

    def __post_init__(self):
        if self.num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        if self.cut_card is None:
            self.cut_card = default_cut_card(self.num_decks)
        if not 0 <= self.cut_card < self.num_decks * 52:
            raise ValueError("cut_card must sit inside the shoe")
        if self.tie_payout < 0:
            raise ValueError("tie_payout must be non-negative")
        if not 0 <= self.banker_commission < 1:
            raise ValueError("banker_commission must be between 0 and 1")
        if self.max_history < 1:
            raise ValueError("max_history must be at least 1")
        if self.board_rows < 1 or self.board_columns < 1:
            raise ValueError("board dimensions must be positive")
        if self.auto_play_rounds < 1:
            raise ValueError("auto_play_rounds must be at least 1")
        if self.initial_balance < 0:
            raise ValueError("initial_balance must be non-negative")
        self.chip_values = tuple(self.chip_values)
        if any(chip <= 0 for chip in self.chip_values):
            raise ValueError("chip values must be positive")

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> "BaccaratRules":
        """
        Build rules from an engine configuration dictionary.

        Unknown keys are rejected so that typos do not silently fall back to
        defaults.
        """
        config = dict(config or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise ValueError(f"Unknown rule options: {', '.join(unknown)}")
        return cls(**config)


def player_draws_third_card(player_value: int) -> bool:
    """
    Determine if Player draws a third card.

    Player drawing rules:
    - 0-5: Draw
    - 6-7: Stand
    - 8-9: Natural (no draw)

    Args:
        player_value: Player's two-card total

    Returns:
        True if Player should draw, False otherwise
    """
    return player_value <= 5


def banker_draws_third_card(banker_value: int, player_drew: bool, player_third_card: int) -> bool:
    """
    Determine if Banker draws a third card.

    Rules:
    - If Player didn't draw: Banker draws on 0-5, stands on 6-7
    - If Player drew:
      - Banker 0-2: Always draw
      - Banker 3: Draw unless Player's 3rd card is 8
      - Banker 4: Draw if Player's 3rd card is 2-7
      - Banker 5: Draw if Player's 3rd card is 4-7
      - Banker 6: Draw if Player's 3rd card is 6-7
      - Banker 7: Stand

    Naturals are settled before this table is consulted.

    Args:
        banker_value: Banker's two-card total
        player_drew: Whether Player drew a third card
        player_third_card: Value of Player's third card (0-9, or -1 if no third card)

    Returns:
        True if Banker should draw, False otherwise
    """
    if not player_drew:
        return banker_value <= 5

    if banker_value <= 2:
        return True
    elif banker_value == 3:
        return player_third_card != 8
    elif banker_value == 4:
        return 2 <= player_third_card <= 7
    elif banker_value == 5:
        return 4 <= player_third_card <= 7
    elif banker_value == 6:
        return player_third_card in (6, 7)
    else:
        return False
