"""Hand model and blackjack hand evaluation."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from blackjack.cards import Card
from blackjack.exceptions import HandCompletedError

BLACKJACK = 21


@dataclass(frozen=True)
class HandEvaluation:
    """Scoring of a hand at one point in time."""

    total: int
    is_soft: bool
    is_blackjack: bool
    is_bust: bool
    all_totals: tuple[int, ...] = ()

    def __str__(self) -> str:
        return (
            f"Total={self.total} Soft={self.is_soft} "
            f"BJ={self.is_blackjack} Bust={self.is_bust}"
        )


def evaluate(hand: "Hand | Iterable[Card]") -> HandEvaluation:
    """
    Score a hand.

    All aces start at 1. One ace is promoted to 11 when that keeps the total
    at 21 or below; promoting a second ace would always add 20 and bust.
    When every candidate busts, the lowest candidate is reported.

    Args:
        hand: A Hand or any iterable of cards

    Returns:
        The evaluation for the cards as they are now
    """
    cards = list(hand.cards if isinstance(hand, Hand) else hand)
    ace_count = sum(1 for card in cards if card.is_ace)
    non_ace_sum = sum(card.base_value for card in cards if not card.is_ace)

    base_total = non_ace_sum + ace_count
    totals = [base_total]
    if ace_count > 0 and base_total + 10 <= BLACKJACK:
        totals.append(base_total + 10)

    legal = [t for t in totals if t <= BLACKJACK]
    if legal:
        total = max(legal)
        is_bust = False
    else:
        total = min(totals)
        is_bust = True

    is_blackjack = (
        len(cards) == 2
        and ace_count == 1
        and any(card.is_ten_value for card in cards)
    )

    return HandEvaluation(
        total=total,
        is_soft=total != base_total,
        is_blackjack=is_blackjack,
        is_bust=is_bust,
        all_totals=tuple(sorted(totals)),
    )


@dataclass
class Hand:
    """
    An ordered, append-only collection of cards plus round flags.

    Once completed, a hand accepts no more cards.
    """

    cards: list[Card] = field(default_factory=list)
    is_completed: bool = False
    was_split_child: bool = False
    has_doubled: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        if self.is_completed:
            raise HandCompletedError("Cannot add card to completed hand")
        self.cards.append(card)

    def mark_completed(self) -> None:
        self.is_completed = True

    def mark_doubled(self) -> None:
        self.has_doubled = True

    def evaluate(self) -> HandEvaluation:
        """Evaluate the hand's current cards."""
        return evaluate(self.cards)

    @property
    def value(self) -> int:
        """Best total (lowest bust total when busted)."""
        return self.evaluate().total

    @property
    def is_soft(self) -> bool:
        """Check if an ace is currently counted as 11."""
        return self.evaluate().is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check for an ace plus a ten-value card as the only two cards."""
        return self.evaluate().is_blackjack

    @property
    def is_busted(self) -> bool:
        return self.evaluate().is_bust

    @property
    def is_pair(self) -> bool:
        """Check if the hand is a pair (two cards of same rank)."""
        return (
            len(self.cards) == 2
            and self.cards[0].rank == self.cards[1].rank
        )

    @property
    def can_double(self) -> bool:
        """Check if the hand can be doubled down."""
        return len(self.cards) == 2 and not self.has_doubled

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        evaluation = self.evaluate()
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({evaluation.total})"
        if evaluation.is_soft:
            value_str = f"(soft {evaluation.total})"
        if evaluation.is_blackjack:
            value_str = "(BLACKJACK)"
        if evaluation.is_bust:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
