"""
Headless round simulator for performance and memory profiling.

Plays many rounds against a seeded local shoe with a deliberately simple
strategy (hit below 12, otherwise stand) and reports throughput along with
a few sanity counters.

Usage:
    python -m blackjack.simulation --rounds 10000 --bet 10
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from decimal import Decimal

import click

from blackjack.dealer import DealerPolicy
from blackjack.game.engine import BlackjackGame
from blackjack.game.state import GamePhase
from blackjack.hand import evaluate
from blackjack.payout import HandOutcome
from blackjack.shoe import Shoe
from blackjack.sources.local import LocalRandomSource
from config import GameConfig, config

logger = logging.getLogger(__name__)

STAND_THRESHOLD = 12


@dataclass(frozen=True)
class SimulationResult:
    """Summary of a simulation run."""

    rounds: int
    final_bankroll: Decimal
    elapsed: float  # seconds
    player_blackjacks: int
    dealer_busts: int

    @property
    def rounds_per_second(self) -> float:
        if self.elapsed <= 0:
            return float(self.rounds)
        return self.rounds / self.elapsed

    def __str__(self) -> str:
        return (
            f"Rounds={self.rounds} FinalBankroll={self.final_bankroll} "
            f"ElapsedMs={self.elapsed * 1000:.0f} RPS={self.rounds_per_second:.1f} "
            f"PlayerBJ={self.player_blackjacks} DealerBusts={self.dealer_busts}"
        )


async def _play_player_hands(game: BlackjackGame) -> None:
    """Hit each open hand until it reaches the stand threshold, then stand."""
    while game.phase == GamePhase.PLAYER_ACTING:
        hand = game.round_state.active_hand
        if hand is None:
            return
        if evaluate(hand).total >= STAND_THRESHOLD:
            game.stand()
            continue
        cards_before = len(hand)
        await game.hit()
        if len(hand) == cards_before:
            # Shoe could not supply a card; stop rather than spin
            game.stand()


async def simulate(
    rounds: int,
    starting_bankroll: Decimal,
    bet: Decimal,
    dealer_hit_soft_17: bool = False,
    deck_count: int = 6,
    seed: int | None = 42,
) -> SimulationResult:
    """Play `rounds` rounds, carrying the bankroll forward between them."""
    rules = GameConfig(default_deck_count=deck_count, dealer_hit_soft_17=dealer_hit_soft_17)
    shoe = Shoe(LocalRandomSource(seed=seed), deck_count=deck_count)
    game = BlackjackGame(
        shoe,
        dealer=DealerPolicy(shoe, hit_soft_17=dealer_hit_soft_17),
        game_config=rules,
    )

    bankroll = Decimal(starting_bankroll)
    player_blackjacks = 0
    dealer_busts = 0
    played = 0

    started = time.perf_counter()
    for _ in range(rounds):
        game.new_round(bankroll, bet)
        await game.deal_initial()
        await _play_player_hands(game)

        if game.phase == GamePhase.PLAYER_ACTING:
            await game.advance_dealer()
        snapshot = game.settle_round()

        bankroll = snapshot.bankroll
        player_blackjacks += sum(
            1 for r in snapshot.settlement_results if r.outcome == HandOutcome.BLACKJACK
        )
        if any(e.startswith("Dealer bust") for e in snapshot.events):
            dealer_busts += 1
        played += 1
    elapsed = time.perf_counter() - started

    result = SimulationResult(played, bankroll, elapsed, player_blackjacks, dealer_busts)
    logger.info("Simulation finished: %s", result)
    return result


def run_simulation(
    rounds: int,
    starting_bankroll: Decimal,
    bet: Decimal,
    dealer_hit_soft_17: bool = False,
    deck_count: int = 6,
    seed: int | None = 42,
) -> SimulationResult:
    """Synchronous wrapper around `simulate`."""
    return asyncio.run(
        simulate(rounds, starting_bankroll, bet, dealer_hit_soft_17, deck_count, seed)
    )


@click.command()
@click.option("--rounds", default=1000, show_default=True, type=click.IntRange(min=1))
@click.option("--bankroll", default="1000", show_default=True, help="Starting bankroll")
@click.option("--bet", default="10", show_default=True, help="Base bet per round")
@click.option("--decks", default=config.game.default_deck_count, show_default=True,
              type=click.IntRange(min=1), help="Decks per shoe")
@click.option("--hit-soft-17/--stand-soft-17", default=config.game.dealer_hit_soft_17,
              show_default=True, help="Dealer soft 17 rule")
@click.option("--seed", default=42, show_default=True, type=int)
def main(rounds: int, bankroll: str, bet: str, decks: int, hit_soft_17: bool, seed: int) -> None:
    """Run a headless blackjack simulation and print a summary."""
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    result = run_simulation(
        rounds,
        Decimal(bankroll),
        Decimal(bet),
        dealer_hit_soft_17=hit_soft_17,
        deck_count=decks,
        seed=seed,
    )
    click.echo(str(result))


if __name__ == "__main__":
    main()
