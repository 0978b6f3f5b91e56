"""Round phases and the mutable round state."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from blackjack.dealer import DealerPlayStep
from blackjack.hand import Hand
from blackjack.payout import HandOutcome


class GamePhase(Enum):
    """
    Round state machine phases.

    Flow: NOT_STARTED → PLAYER_ACTING → DEALER_ACTING → SETTLED, with a
    shortcut PLAYER_ACTING → SETTLED when every player hand busts.
    """

    NOT_STARTED = "not_started"
    PLAYER_ACTING = "player_acting"
    DEALER_ACTING = "dealer_acting"
    SETTLED = "settled"

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True)
class SettlementHandResult:
    """Settlement of one player hand."""

    hand_index: int
    outcome: HandOutcome
    bet: Decimal
    payout: Decimal
    net_delta: Decimal


@dataclass
class RoundState:
    """Everything the engine knows about the round in flight."""

    player_hands: list[Hand] = field(default_factory=list)
    dealer_hand: Hand = field(default_factory=Hand)
    active_hand_index: int = 0
    bankroll: Decimal = Decimal("0")
    current_bet: Decimal = Decimal("0")
    phase: GamePhase = GamePhase.NOT_STARTED
    dealer_played: bool = False
    dealer_transcript: list[DealerPlayStep] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    settlement_results: list[SettlementHandResult] = field(default_factory=list)
    round_net_delta: Decimal = Decimal("0")
    round_id: int | None = None

    @property
    def active_hand(self) -> Hand | None:
        """Get the current active hand."""
        if 0 <= self.active_hand_index < len(self.player_hands):
            return self.player_hands[self.active_hand_index]
        return None

    @property
    def all_hands_completed(self) -> bool:
        return all(hand.is_completed for hand in self.player_hands)

    @property
    def is_settled(self) -> bool:
        """Check if settlement results have been recorded for this round."""
        return bool(self.settlement_results)

    def effective_bet(self, hand: Hand) -> Decimal:
        """Bet riding on `hand`: the base bet, twice over if the hand doubled."""
        if hand.has_doubled:
            return self.current_bet * 2
        return self.current_bet
