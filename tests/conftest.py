"""Pytest fixtures for blackjack engine tests."""

import pytest
from random import Random

from blackjack.cards import Card, Rank, Suit
from blackjack.dealer import DealerPolicy
from blackjack.game import BlackjackGame
from blackjack.hand import Hand
from blackjack.shoe import Shoe
from blackjack.sources import LocalRandomSource, ScriptedSource
from config import GameConfig


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def local_shoe(rng):
    """A 6-deck shoe fed by a seeded local source."""
    return Shoe(LocalRandomSource(rng=rng), deck_count=6)


@pytest.fixture
def make_hand():
    """Factory for hands built from card codes, e.g. make_hand("AS", "0H")."""

    def _make(*codes: str, **flags) -> Hand:
        return Hand(cards=[Card.from_string(c) for c in codes], **flags)

    return _make


@pytest.fixture
def make_shoe():
    """Factory for a one-deck shoe that deals exactly the given cards, in order."""

    def _make(*codes: str) -> Shoe:
        return Shoe(ScriptedSource(codes), deck_count=1)

    return _make


@pytest.fixture
def make_game(make_shoe):
    """
    Factory for a game whose shoe deals the given cards in order.

    Deal order is player, dealer, player, dealer; later cards go to hits,
    splits, doubles and the dealer's draws.
    """

    def _make(*codes: str, hit_soft_17: bool = False) -> BlackjackGame:
        shoe = make_shoe(*codes)
        rules = GameConfig(default_deck_count=1, dealer_hit_soft_17=hit_soft_17)
        return BlackjackGame(
            shoe,
            dealer=DealerPolicy(shoe, hit_soft_17=hit_soft_17),
            game_config=rules,
        )

    return _make


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    hand = Hand()
    hand.add_card(Card(Rank.EIGHT, Suit.SPADES))
    hand.add_card(Card(Rank.EIGHT, Suit.HEARTS))
    return hand


@pytest.fixture
def bust_hand():
    """A busted hand."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    hand.add_card(Card(Rank.KING, Suit.CLUBS))
    return hand
