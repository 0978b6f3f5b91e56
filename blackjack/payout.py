"""Settlement of a player hand against the dealer."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from blackjack.hand import HandEvaluation

BLACKJACK_PAYOUT = Decimal("1.5")  # 3:2
ZERO = Decimal("0")


class HandOutcome(Enum):
    """Result of a settled player hand."""

    BLACKJACK = "blackjack"
    WIN = "win"
    LOSE = "lose"
    PUSH = "push"
    BUST = "bust"

    def __str__(self) -> str:
        return self.name.title()


@dataclass(frozen=True)
class PayoutResult:
    """Outcome and money movement for one hand."""

    outcome: HandOutcome
    net_delta: Decimal
    payout_amount: Decimal

    def __str__(self) -> str:
        return f"{self.outcome} Net={self.net_delta} Paid={self.payout_amount}"


def is_natural(evaluation: HandEvaluation, was_split: bool) -> bool:
    """A natural is a two-card blackjack on a hand that did not come from a split."""
    return evaluation.is_blackjack and not was_split


def compute_payout(
    player: HandEvaluation,
    dealer: HandEvaluation,
    bet: Decimal,
    was_split: bool = False,
) -> PayoutResult:
    """
    Settle one player hand.

    Args:
        player: Evaluation of the player hand
        dealer: Evaluation of the dealer hand
        bet: Effective bet for the hand (already doubled if the hand doubled)
        was_split: True if the hand came from a split (no 3:2 payout)

    Returns:
        The outcome, the net change to the bankroll and the amount paid out
    """
    bet = Decimal(bet)

    # Player bust loses even when the dealer busts too
    if player.is_bust:
        return PayoutResult(HandOutcome.BUST, -bet, ZERO)

    player_natural = is_natural(player, was_split)

    if dealer.is_bust:
        if player_natural:
            payout = bet * BLACKJACK_PAYOUT
            return PayoutResult(HandOutcome.BLACKJACK, payout, payout)
        return PayoutResult(HandOutcome.WIN, bet, bet)

    # Dealer hands are never split, so a dealer blackjack is always natural
    dealer_natural = dealer.is_blackjack

    if player_natural and dealer_natural:
        return PayoutResult(HandOutcome.PUSH, ZERO, ZERO)
    if dealer_natural:
        return PayoutResult(HandOutcome.LOSE, -bet, ZERO)
    if player_natural:
        payout = bet * BLACKJACK_PAYOUT
        return PayoutResult(HandOutcome.BLACKJACK, payout, payout)

    if player.total > dealer.total:
        return PayoutResult(HandOutcome.WIN, bet, bet)
    if player.total < dealer.total:
        return PayoutResult(HandOutcome.LOSE, -bet, ZERO)
    return PayoutResult(HandOutcome.PUSH, ZERO, ZERO)
