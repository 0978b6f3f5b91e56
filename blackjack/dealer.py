"""Dealer auto-play."""

import logging
from dataclasses import dataclass

from blackjack.cards import Card
from blackjack.hand import Hand, HandEvaluation, evaluate
from blackjack.shoe import Shoe
from config import config

logger = logging.getLogger(__name__)

DEALER_STAND_TOTAL = 17


@dataclass(frozen=True)
class DealerPlayStep:
    """One line of the dealer transcript."""

    step_number: int
    total: int
    is_soft: bool
    drew_card: bool
    card: Card | None = None


@dataclass(frozen=True)
class DealerPlayResult:
    """Transcript of a dealer turn and the dealer's final evaluation."""

    steps: tuple[DealerPlayStep, ...]
    final_evaluation: HandEvaluation


class DealerPolicy:
    """
    Plays the dealer hand to completion.

    The dealer stands on any total above 17 and on hard 17. Soft 17 is hit
    only when `hit_soft_17` is set. A two-card natural never draws.
    """

    def __init__(self, shoe: Shoe, hit_soft_17: bool | None = None) -> None:
        self._shoe = shoe
        if hit_soft_17 is None:
            hit_soft_17 = config.game.dealer_hit_soft_17
        self.hit_soft_17 = hit_soft_17

    def should_hit(self, evaluation: HandEvaluation) -> bool:
        """Determine if the dealer draws on this evaluation."""
        if evaluation.is_bust:
            return False
        if evaluation.total > DEALER_STAND_TOTAL:
            return False
        if evaluation.total == DEALER_STAND_TOTAL and (
            not evaluation.is_soft or not self.hit_soft_17
        ):
            return False
        return True

    async def play(self, dealer_hand: Hand) -> DealerPlayResult:
        """
        Draw for the dealer until a stopping condition, then complete the hand.

        An empty draw from an exhausted shoe ends the turn early.
        """
        evaluation = evaluate(dealer_hand)
        steps = [DealerPlayStep(0, evaluation.total, evaluation.is_soft, False)]

        if not evaluation.is_blackjack:
            while self.should_hit(evaluation):
                drawn = await self._shoe.draw(1)
                if not drawn:
                    logger.warning("Dealer turn ended early: shoe returned no cards")
                    break
                card = drawn[0]
                dealer_hand.add_card(card)
                evaluation = evaluate(dealer_hand)
                steps.append(
                    DealerPlayStep(
                        len(steps), evaluation.total, evaluation.is_soft, True, card
                    )
                )

        dealer_hand.mark_completed()
        logger.debug("Dealer finished: %s after %d draws", evaluation, len(steps) - 1)
        return DealerPlayResult(tuple(steps), evaluation)
