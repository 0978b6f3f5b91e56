"""Card sources that feed the shoe."""

from blackjack.sources.base import CardSource, RawCard
from blackjack.sources.deck_api import DeckApiSource
from blackjack.sources.local import LocalRandomSource
from blackjack.sources.scripted import ScriptedSource

__all__ = [
    "CardSource",
    "RawCard",
    "DeckApiSource",
    "LocalRandomSource",
    "ScriptedSource",
]
