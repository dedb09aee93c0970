"""
Baccarat CLI and simulation interface.

Run simulations through the betting table, compare the three bets, or watch
a paced auto play session in the console.
"""

import argparse
import asyncio
import logging
import random
import time
from typing import Dict, Optional

from puntobanco.adapters import CLIAdapter
from puntobanco.analysis.statistics import (
    SessionAnalyzer,
    shoe_composition_test,
    theoretical_expected_value,
)
from puntobanco.baccarat.constants import BetType
from puntobanco.baccarat.rules import BaccaratRules
from puntobanco.baccarat.table import BaccaratTable
from puntobanco.common.io_interface import ConsoleIOInterface, LoggingIOInterface
from puntobanco.common.shoe import Shoe
from puntobanco.engine import BaccaratEngine

logger = logging.getLogger(__name__)


def run_simulation(
    num_games: int = 10000,
    bet_type: BetType = BetType.BANKER,
    bet_amount: int = 10,
    num_decks: int = 8,
    verbose: bool = False,
    seed: Optional[int] = None,
) -> Dict:
    """
    Run a Baccarat simulation through a betting table.

    Args:
        num_games: Number of rounds to simulate
        bet_type: Side backed every round
        bet_amount: Amount wagered per round (0 to observe)
        num_decks: Number of decks in the shoe
        verbose: Print detailed results
        seed: Seed for the shoe's random source

    Returns:
        Dictionary with simulation results
    """
    rules = BaccaratRules(
        num_decks=num_decks,
        initial_balance=num_games * bet_amount,
        max_history=max(num_games, 1),
    )
    table = BaccaratTable(rules, rng=random.Random(seed))
    table.select_side(bet_type)

    start_time = time.time()

    for _ in range(num_games):
        if bet_amount > 0:
            table.place_bet(bet_amount)
        table.deal_round()
        table.next_round()

    duration = time.time() - start_time
    stats = table.history.stats
    house_edge = (-stats.net_result / stats.total_wagered) * 100 if stats.total_wagered > 0 else 0
    analysis = SessionAnalyzer(table.get_history(), rules).run_all_analyses()

    results = {
        "num_games": num_games,
        "bet_type": bet_type.value,
        "total_wagered": stats.total_wagered,
        "net_earnings": stats.net_result,
        "house_edge": house_edge,
        "theoretical_house_edge": -theoretical_expected_value(bet_type, rules) * 100,
        "player_wins": stats.player_wins,
        "banker_wins": stats.banker_wins,
        "ties": stats.ties,
        "shoes": table.shoe.builds,
        "duration": duration,
        "games_per_second": num_games / duration if duration > 0 else 0,
        "analysis": analysis,
    }
    logger.info("Simulated %d rounds on %s in %.2fs", num_games, bet_type.value, duration)

    if verbose:
        _print_simulation(results, num_decks, seed)

    return results


def _print_simulation(results: Dict, num_decks: int, seed: Optional[int]) -> None:
    num_games = results["num_games"] or 1
    ev = results["analysis"]["expected_value"]
    distribution = results["analysis"]["outcome_distribution"]
    composition = shoe_composition_test(Shoe(num_decks=num_decks, rng=random.Random(seed)).cards)

    print(f"\nBaccarat Simulation Results ({results['bet_type']} bet)")
    print("=" * 60)
    print(f"Rounds played: {results['num_games']:,}  (shoes used: {results['shoes']})")
    print(f"Total wagered: ${results['total_wagered']:,}")
    print(f"Net earnings: ${results['net_earnings']:,}")
    print(f"House edge: {results['house_edge']:.2f}% (theoretical {results['theoretical_house_edge']:.2f}%)")
    ci = ev["confidence_interval"]
    print(f"Profit per unit: {ev['expected_value']:+.4f} (95% CI {ci['lower']:+.4f} to {ci['upper']:+.4f})")
    print("\nOutcome Distribution:")
    print(f"  Player wins: {results['player_wins']:,} ({results['player_wins'] / num_games * 100:.1f}%)")
    print(f"  Banker wins: {results['banker_wins']:,} ({results['banker_wins'] / num_games * 100:.1f}%)")
    print(f"  Ties: {results['ties']:,} ({results['ties'] / num_games * 100:.1f}%)")
    print(f"  Chi-square vs eight-deck odds: {distribution['chi_square']:.3f} (p = {distribution['p_value']:.3f})")
    print(f"\nShoe composition uniform: {composition['uniform']} ({composition['total_cards']} cards)")
    print(f"\nDuration: {results['duration']:.2f} seconds")
    print(f"Rounds per second: {results['games_per_second']:,.0f}")
    print("=" * 60)


def compare_bet_types(num_games: int = 10000, bet_amount: int = 10, seed: Optional[int] = None):
    """
    Compare all three bet types (Player, Banker, Tie).

    Args:
        num_games: Number of rounds to simulate for each bet type
        bet_amount: Amount to bet per round
        seed: Seed for the shoe's random source
    """
    print("\n" + "=" * 70)
    print("BACCARAT BET TYPE COMPARISON")
    print("=" * 70)
    print(f"Simulating {num_games:,} rounds for each bet type...")
    print()

    bet_types = [BetType.PLAYER, BetType.BANKER, BetType.TIE]
    results = {
        bet_type: run_simulation(num_games, bet_type, bet_amount, seed=seed)
        for bet_type in bet_types
    }

    print(f"{'Bet Type':<10} {'House Edge':<12} {'Theoretical':<13} {'Net Earnings'}")
    print("-" * 70)

    for bet_type in bet_types:
        r = results[bet_type]
        print(
            f"{bet_type.value.capitalize():<10} "
            f"{r['house_edge']:>10.2f}%  "
            f"{r['theoretical_house_edge']:>10.2f}%  "
            f"${r['net_earnings']:>12,}"
        )

    print("-" * 70)
    print("=" * 70)
    return results


async def run_autoplay(
    rounds: int = 10,
    bet_type: BetType = BetType.BANKER,
    bet_amount: int = 100,
    reveal_delay: float = 0.3,
    transcript: Optional[str] = None,
    seed: Optional[int] = None,
) -> Optional[Dict]:
    """
    Watch a paced auto play session in the console, or write it to a transcript.
    """
    io_interface = LoggingIOInterface(transcript) if transcript else ConsoleIOInterface()
    engine = BaccaratEngine(
        CLIAdapter(io_interface),
        {"reveal_delay": reveal_delay, "auto_play_pause": reveal_delay * 3},
        rng=random.Random(seed),
    )
    await engine.initialize()
    try:
        await engine.start_game()
        await engine.select_side(bet_type)
        if bet_amount > 0:
            await engine.place_bet(bet_amount)
        summary = await engine.run_auto_play(rounds)
    finally:
        await engine.shutdown()
    return summary


async def play_console(seed: Optional[int] = None) -> int:
    """Play at the console until the bettor quits."""
    engine = BaccaratEngine(CLIAdapter(), {"reveal_delay": 0.5}, rng=random.Random(seed))
    await engine.initialize()
    try:
        await engine.start_game()
        return await engine.play_interactive()
    finally:
        await engine.shutdown()


def main():
    """Main CLI interface for Baccarat simulation."""
    parser = argparse.ArgumentParser(
        description="Punto Banco Baccarat Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run 10,000 rounds with Banker bets
  python -m puntobanco.baccarat.baccarat --simulate --num_games 10000 --bet banker

  # Compare all bet types
  python -m puntobanco.baccarat.baccarat --compare

  # Watch ten auto played rounds, writing them to a file
  python -m puntobanco.baccarat.baccarat --autoplay 10 --transcript session.log
        """,
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--simulate", action="store_true", help="Run simulation mode")
    mode.add_argument(
        "--compare", action="store_true", help="Compare all bet types (Player, Banker, Tie)"
    )
    mode.add_argument(
        "--autoplay", type=int, metavar="ROUNDS", help="Auto play ROUNDS rounds at a paced table"
    )
    mode.add_argument("--play", action="store_true", help="Play interactively at the console")

    parser.add_argument(
        "--num_games", type=int, default=10000, help="Number of rounds to simulate (default: 10000)"
    )
    parser.add_argument(
        "--bet",
        type=str,
        choices=["player", "banker", "tie"],
        default="banker",
        help="Bet type (default: banker)",
    )
    parser.add_argument(
        "--bet_amount", type=int, default=10, help="Bet amount per round (default: 10)"
    )
    parser.add_argument(
        "--num_decks", type=int, default=8, help="Number of decks in shoe (default: 8)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible shoes")
    parser.add_argument(
        "--delay", type=float, default=0.3, help="Seconds between revealed cards in auto play"
    )
    parser.add_argument("--transcript", type=str, default=None, help="Write auto play output to a file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.bet_amount < 0:
        parser.error("--bet_amount must be non-negative")

    bet_type = BetType[args.bet.upper()]

    if args.simulate:
        run_simulation(args.num_games, bet_type, args.bet_amount, args.num_decks, verbose=True, seed=args.seed)
    elif args.autoplay is not None:
        summary = asyncio.run(
            run_autoplay(
                args.autoplay,
                bet_type,
                args.bet_amount,
                reveal_delay=args.delay,
                transcript=args.transcript,
                seed=args.seed,
            )
        )
        if summary:
            print(
                f"\n{summary['rounds_completed']} rounds, "
                f"net result ${summary['net_result']:,}"
            )
    elif args.play:
        asyncio.run(play_console(args.seed))
    else:
        # Default: show comparison
        compare_bet_types(args.num_games, args.bet_amount, args.seed)


if __name__ == "__main__":
    main()
