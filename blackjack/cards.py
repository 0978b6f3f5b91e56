"""Card, Rank, and Suit - immutable card representations."""

import logging
from dataclasses import dataclass
from enum import Enum, auto

logger = logging.getLogger(__name__)


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]

    @property
    def code(self) -> str:
        """Single-letter suit code (C, D, H, S)."""
        return self.name[0]


class Rank(Enum):
    """Card ranks, valued in natural order (Ace high)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def base_value(self) -> int:
        """
        Return the baseline scoring value.

        Aces count 1 here; the hand evaluator decides when one counts 11.
        """
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 1
        return 10  # Face cards

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank scores 10."""
        return self.base_value == 10

    @property
    def code(self) -> str:
        """Single-character rank code; Ten is '0'."""
        if self == Rank.TEN:
            return "0"
        return str(self)


_RANK_CODES = {rank.code: rank for rank in Rank}
_SUIT_CODES = {suit.code: suit for suit in Suit}

# Names used by deck-of-cards style sources ("ACE", "10", "KING", ...)
_RANK_NAMES = {
    "ACE": Rank.ACE,
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "JACK": Rank.JACK,
    "QUEEN": Rank.QUEEN,
    "KING": Rank.KING,
}
_SUIT_NAMES = {suit.name: suit for suit in Suit}

FALLBACK_RANK = Rank.TWO
FALLBACK_SUIT = Suit.SPADES


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def base_value(self) -> int:
        """Return the baseline scoring value (Ace = 1)."""
        return self.rank.base_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    @property
    def code(self) -> str:
        """Two-character short code, e.g. 'AS', '0H', '7D'."""
        return f"{self.rank.code}{self.suit.code}"

    @property
    def rank_name(self) -> str:
        """Rank name as card sources spell it ('ACE', '10', 'KING')."""
        if self.rank.value <= 10:
            return str(self.rank.value)
        return self.rank.name

    @classmethod
    def from_code(cls, code: str) -> "Card":
        """
        Parse a two-character short code.

        Raises:
            ValueError: If the code is not exactly a known rank + suit pair.
        """
        if not isinstance(code, str) or len(code) != 2:
            raise ValueError(f"Invalid card code: {code!r}")
        rank = _RANK_CODES.get(code[0].upper())
        suit = _SUIT_CODES.get(code[1].upper())
        if rank is None or suit is None:
            raise ValueError(f"Invalid card code: {code!r}")
        return cls(rank, suit)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h', '0D'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            **_RANK_CODES,
            "10": Rank.TEN,
            "T": Rank.TEN,
        }

        suit_map = {
            **_SUIT_CODES,
            "♣": Suit.CLUBS,
            "♦": Suit.DIAMONDS,
            "♥": Suit.HEARTS,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def card_from_names(rank_name: str, suit_name: str) -> Card:
    """
    Map source rank/suit names to a Card, case-insensitively.

    Unknown names do not raise: they map to FALLBACK_RANK / FALLBACK_SUIT and
    a warning is logged, so a misbehaving source degrades instead of
    aborting the round.
    """
    rank = _RANK_NAMES.get(rank_name.strip().upper())
    if rank is None:
        logger.warning("Unmapped rank name %r, using %s", rank_name, FALLBACK_RANK.name)
        rank = FALLBACK_RANK
    suit = _SUIT_NAMES.get(suit_name.strip().upper())
    if suit is None:
        logger.warning("Unmapped suit name %r, using %s", suit_name, FALLBACK_SUIT.name)
        suit = FALLBACK_SUIT
    return Card(rank, suit)


def build_decks(deck_count: int = 1) -> list[Card]:
    """Return `deck_count` full 52-card decks in a fixed, unshuffled order."""
    if deck_count < 1:
        raise ValueError("deck_count must be at least 1")
    return [
        Card(rank, suit)
        for _ in range(deck_count)
        for suit in Suit
        for rank in Rank
    ]
