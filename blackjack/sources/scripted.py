"""Deterministic card source for tests and replays."""

from collections import deque
from typing import Iterable

from blackjack.cards import Card
from blackjack.sources.base import CardSource, RawCard


class ScriptedSource(CardSource):
    """
    Replays fixed card sequences.

    Each call to `create_shoe` consumes the next scripted deck, so passing
    several decks exercises shoe refills. Once the script is used up, new
    shoes are empty.
    """

    def __init__(self, *decks: Iterable[Card | str]) -> None:
        self._decks: deque[list[RawCard]] = deque(
            [self._to_raw(card) for card in deck] for deck in decks
        )
        self._current: list[RawCard] = []
        self.shoes_created = 0

    @staticmethod
    def _to_raw(card: Card | str) -> RawCard:
        if isinstance(card, str):
            card = Card.from_string(card)
        return RawCard.from_card(card)

    async def create_shoe(self, deck_count: int) -> str:
        self._current = self._decks.popleft() if self._decks else []
        self.shoes_created += 1
        return f"scripted-{self.shoes_created}"

    async def draw(self, handle: str, count: int) -> list[RawCard]:
        drawn, self._current = self._current[:count], self._current[count:]
        return drawn
