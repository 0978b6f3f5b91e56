"""Multi-deck shoe that refills itself from a card source."""

import asyncio
import logging
from collections import deque

from blackjack.cards import Card, card_from_names
from blackjack.sources.base import CardSource, RawCard
from config import config

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52
MAX_REFILLS_PER_DRAW = 2


class Shoe:
    """
    A FIFO queue of cards fed by a CardSource.

    When a draw asks for more cards than remain, the shoe is replaced with a
    freshly shuffled one before the draw is served. A single lock guards the
    queue and refill, so concurrent callers never observe a half-loaded shoe
    and at most one refill runs at a time.

    The lock is an `asyncio.Lock`, so a shoe may only be shared between
    coroutines running on one event loop. It gives no protection to callers
    on other threads or other loops.
    """

    def __init__(self, source: CardSource, deck_count: int | None = None) -> None:
        """
        Initialize the shoe.

        Args:
            source: Where new shoes come from
            deck_count: Decks per shoe (uses config default if not provided)
        """
        if deck_count is None:
            deck_count = config.game.default_deck_count
        if deck_count < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._source = source
        self._deck_count = deck_count
        self._cards: deque[Card] = deque()
        self._lock = asyncio.Lock()
        self.refills = 0

    @property
    def remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def deck_count(self) -> int:
        return self._deck_count

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self._deck_count * CARDS_PER_DECK

    async def draw(self, count: int = 1) -> list[Card]:
        """
        Draw cards in FIFO order.

        Returns fewer than `count` cards only when the source cannot supply
        enough even after refilling.

        Raises:
            CardSourceError: If the source fails while refilling
        """
        if count <= 0:
            return []

        async with self._lock:
            attempts = 0
            while len(self._cards) < count and attempts < MAX_REFILLS_PER_DRAW:
                await self._refill()
                attempts += 1

            drawn = [self._cards.popleft() for _ in range(min(count, len(self._cards)))]

        if len(drawn) < count:
            logger.warning(
                "Shoe exhausted: requested %d cards, drew %d", count, len(drawn)
            )
        return drawn

    async def _refill(self) -> None:
        """Replace the queue with a new shuffled shoe from the source."""
        handle = await self._source.create_shoe(self._deck_count)
        raw_cards = await self._source.draw(handle, self.total_cards)

        # Nothing is replaced until the source has answered in full
        self._cards = deque(self._map(raw_cards))
        self.refills += 1
        logger.info(
            "Shoe refilled from %s: %d cards (%d decks)",
            handle,
            len(self._cards),
            self._deck_count,
        )

    @staticmethod
    def _map(raw_cards: list[RawCard]) -> list[Card]:
        cards = []
        for raw in raw_cards:
            if raw.value is None or raw.suit is None:
                logger.warning("Skipping incomplete card from source: %r", raw)
                continue
            cards.append(card_from_names(raw.value, raw.suit))
        return cards

    def __len__(self) -> int:
        return len(self._cards)
