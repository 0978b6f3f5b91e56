"""In-process shuffled card source."""

import logging
import itertools
from random import Random

from blackjack.cards import build_decks
from blackjack.sources.base import CardSource, RawCard

logger = logging.getLogger(__name__)


class LocalRandomSource(CardSource):
    """Builds multi-deck shoes locally and shuffles them with a Random."""

    def __init__(self, rng: Random | None = None, seed: int | None = None) -> None:
        """
        Initialize the source.

        Args:
            rng: Random number generator for shuffling (takes precedence)
            seed: Seed for a new generator when `rng` is not given
        """
        self._rng = rng or Random(seed)
        self._shoes: dict[str, list[RawCard]] = {}
        self._ids = itertools.count(1)

    async def create_shoe(self, deck_count: int) -> str:
        cards = build_decks(deck_count)
        # Random.shuffle is an in-place Fisher-Yates shuffle
        self._rng.shuffle(cards)
        handle = f"local-{next(self._ids)}"
        # Only the most recent shoe is ever drawn from
        self._shoes = {handle: [RawCard.from_card(c) for c in cards]}
        logger.debug("Created local shoe %s with %d cards", handle, len(cards))
        return handle

    async def draw(self, handle: str, count: int) -> list[RawCard]:
        pool = self._shoes.get(handle, [])
        drawn, self._shoes[handle] = pool[:count], pool[count:]
        return drawn
