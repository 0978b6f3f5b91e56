"""Card source capability shared by every shoe backend."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from blackjack.cards import Card


class RawCard(BaseModel):
    """A card as a source reports it, before mapping to a Card."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    value: str | None = None  # "ACE", "2".."10", "JACK", ...
    suit: str | None = None  # "CLUBS", "DIAMONDS", "HEARTS", "SPADES"
    code: str | None = None

    @classmethod
    def from_card(cls, card: Card) -> "RawCard":
        """Describe a Card the way a source would."""
        return cls(value=card.rank_name, suit=card.suit.name, code=card.code)


class CardSource(ABC):
    """
    Abstract card source.

    A source creates shuffled shoes and hands out their cards in order. The
    Shoe is the only caller; it serializes access, so implementations need
    not be safe for concurrent use.
    """

    @abstractmethod
    async def create_shoe(self, deck_count: int) -> str:
        """Create a freshly shuffled shoe and return its handle."""
        ...

    @abstractmethod
    async def draw(self, handle: str, count: int) -> list[RawCard]:
        """Draw up to `count` cards, in order, from the shoe `handle`."""
        ...

    async def aclose(self) -> None:
        """Release any resources held by the source."""
        return None
