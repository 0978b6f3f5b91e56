"""Single-table blackjack round engine - UI and storage agnostic."""

from blackjack.cards import Card, Rank, Suit
from blackjack.hand import Hand, HandEvaluation, evaluate
from blackjack.shoe import Shoe
from blackjack.dealer import DealerPolicy
from blackjack.payout import HandOutcome, PayoutResult, compute_payout
from blackjack.exceptions import (
    BlackjackError,
    CardSourceError,
    HandCompletedError,
    PhaseError,
    SnapshotError,
)

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "Hand",
    "HandEvaluation",
    "evaluate",
    "Shoe",
    "DealerPolicy",
    "HandOutcome",
    "PayoutResult",
    "compute_payout",
    "BlackjackError",
    "CardSourceError",
    "HandCompletedError",
    "PhaseError",
    "SnapshotError",
]
