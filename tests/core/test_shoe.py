"""Tests for the refilling Shoe."""

import asyncio
import logging

import pytest

from blackjack.cards import Card, Rank, Suit
from blackjack.exceptions import CardSourceError
from blackjack.shoe import MAX_REFILLS_PER_DRAW, Shoe
from blackjack.sources import CardSource, LocalRandomSource, RawCard, ScriptedSource


class CountingSource(CardSource):
    """Local source that counts calls and yields to the loop while creating."""

    def __init__(self, seed: int = 7) -> None:
        self._inner = LocalRandomSource(seed=seed)
        self.creates = 0

    async def create_shoe(self, deck_count: int) -> str:
        self.creates += 1
        await asyncio.sleep(0)
        return await self._inner.create_shoe(deck_count)

    async def draw(self, handle: str, count: int) -> list[RawCard]:
        await asyncio.sleep(0)
        return await self._inner.draw(handle, count)


class FailingSource(CardSource):
    """Source whose shoe creation always fails."""

    async def create_shoe(self, deck_count: int) -> str:
        raise CardSourceError("deck service unavailable")

    async def draw(self, handle: str, count: int) -> list[RawCard]:
        return []


class RawSource(CardSource):
    """Source that hands out a fixed raw payload."""

    def __init__(self, raw_cards: list[RawCard]) -> None:
        self._raw_cards = raw_cards

    async def create_shoe(self, deck_count: int) -> str:
        return "raw"

    async def draw(self, handle: str, count: int) -> list[RawCard]:
        return list(self._raw_cards[:count])


class TestShoe:
    """Tests for the Shoe class."""

    def test_shoe_starts_empty(self):
        """Test that a new shoe holds no cards until its first draw."""
        shoe = Shoe(ScriptedSource(["AS"]), deck_count=2)
        assert shoe.remaining == 0
        assert shoe.deck_count == 2
        assert shoe.total_cards == 104

    def test_invalid_deck_count(self):
        """Test that a zero-deck shoe is rejected."""
        with pytest.raises(ValueError):
            Shoe(ScriptedSource(), deck_count=0)

    @pytest.mark.asyncio
    async def test_first_draw_fills_full_shoe(self, local_shoe):
        """Test that the first draw loads deck_count * 52 cards."""
        cards = await local_shoe.draw(1)
        assert len(cards) == 1
        assert local_shoe.remaining == 6 * 52 - 1
        assert local_shoe.refills == 1

    @pytest.mark.asyncio
    async def test_draw_is_fifo(self, make_shoe):
        """Test that cards come out in source order."""
        shoe = make_shoe("AS", "0H", "7D", "KC")
        assert await shoe.draw(2) == [Card(Rank.ACE, Suit.SPADES), Card(Rank.TEN, Suit.HEARTS)]
        assert await shoe.draw(2) == [Card(Rank.SEVEN, Suit.DIAMONDS), Card(Rank.KING, Suit.CLUBS)]

    @pytest.mark.asyncio
    async def test_non_positive_count(self, make_shoe):
        """Test that count <= 0 returns nothing and never refills."""
        shoe = make_shoe("AS")
        assert await shoe.draw(0) == []
        assert await shoe.draw(-3) == []
        assert shoe.refills == 0

    @pytest.mark.asyncio
    async def test_refills_when_short(self):
        """Test that a short shoe is replaced by the next one."""
        source = ScriptedSource(["AS"], ["2C", "3C", "4C"])
        shoe = Shoe(source, deck_count=1)
        assert await shoe.draw(1) == [Card(Rank.ACE, Suit.SPADES)]

        cards = await shoe.draw(2)
        assert [c.code for c in cards] == ["2C", "3C"]
        assert shoe.refills == 2
        assert shoe.remaining == 1

    @pytest.mark.asyncio
    async def test_refill_discards_leftovers(self):
        """Test that a refill replaces the queue rather than appending to it."""
        shoe = Shoe(ScriptedSource(["AS"], ["2C", "3C"]), deck_count=1)
        cards = await shoe.draw(2)
        assert [c.code for c in cards] == ["2C", "3C"]
        assert shoe.remaining == 0

    @pytest.mark.asyncio
    async def test_refill_attempted_at_most_twice(self):
        """Test that an exhausted source stops after two refill attempts."""
        source = ScriptedSource(["AS"])
        shoe = Shoe(source, deck_count=1)
        await shoe.draw(1)

        assert await shoe.draw(1) == []
        assert source.shoes_created == 1 + MAX_REFILLS_PER_DRAW

    @pytest.mark.asyncio
    async def test_degraded_draw_returns_partial(self, caplog):
        """Test that a draw returns what it can when the source stays short."""
        # The first shoe is too small; the second refill is also short
        shoe = Shoe(ScriptedSource(["2C"], ["AS", "KH"]), deck_count=1)
        with caplog.at_level(logging.WARNING, logger="blackjack.shoe"):
            cards = await shoe.draw(4)
        assert [c.code for c in cards] == ["AS", "KH"]
        assert "Shoe exhausted" in caplog.text

    @pytest.mark.asyncio
    async def test_source_error_leaves_queue_untouched(self):
        """Test that a failing refill propagates and keeps the old cards."""
        shoe = Shoe(ScriptedSource(["AS", "KH"]), deck_count=1)
        await shoe.draw(1)
        shoe._source = FailingSource()

        with pytest.raises(CardSourceError):
            await shoe.draw(5)
        assert shoe.remaining == 1
        assert shoe.refills == 1

    @pytest.mark.asyncio
    async def test_incomplete_raw_cards_are_skipped(self):
        """Test that raw cards missing a value or suit are dropped."""
        source = RawSource([
            RawCard(value="ACE", suit="SPADES"),
            RawCard(value=None, suit="HEARTS"),
            RawCard(value="KING", suit=None),
            RawCard(value="5", suit="CLUBS"),
        ])
        shoe = Shoe(source, deck_count=1)
        cards = await shoe.draw(2)
        assert cards == [Card(Rank.ACE, Suit.SPADES), Card(Rank.FIVE, Suit.CLUBS)]

    @pytest.mark.asyncio
    async def test_unmapped_raw_cards_fall_back(self):
        """Test that unknown names map to the fallback card."""
        shoe = Shoe(RawSource([RawCard(value="JOKER", suit="RED")]), deck_count=1)
        assert await shoe.draw(1) == [Card(Rank.TWO, Suit.SPADES)]

    @pytest.mark.asyncio
    async def test_concurrent_draws_single_refill(self):
        """Test that concurrent draws on an empty shoe trigger one refill."""
        source = CountingSource()
        shoe = Shoe(source, deck_count=1)

        results = await asyncio.gather(*(shoe.draw(3) for _ in range(10)))

        assert source.creates == 1
        drawn = [card for cards in results for card in cards]
        assert len(drawn) == 30
        assert shoe.remaining == 52 - 30

    @pytest.mark.asyncio
    async def test_concurrent_draws_are_disjoint(self):
        """Test that concurrent callers never receive the same dealt card."""
        shoe = Shoe(ScriptedSource([f"{r}{s}" for s in "CDHS" for r in "234567890JQKA"]), deck_count=1)

        results = await asyncio.gather(*(shoe.draw(4) for _ in range(13)))

        drawn = [card for cards in results for card in cards]
        assert len(drawn) == 52
        assert len(set(drawn)) == 52

    @pytest.mark.asyncio
    async def test_tasks_on_one_loop_draw_in_lock_order(self):
        """Test that tasks sharing a shoe on one loop are served in FIFO order."""
        shoe = Shoe(CountingSource(seed=11), deck_count=1)
        reference = Shoe(LocalRandomSource(seed=11), deck_count=1)

        first = asyncio.create_task(shoe.draw(5))
        second = asyncio.create_task(shoe.draw(5))
        await asyncio.gather(first, second)

        expected = await reference.draw(10)
        assert first.result() == expected[:5]
        assert second.result() == expected[5:]
        assert shoe.refills == 1

    @pytest.mark.asyncio
    async def test_seeded_shoes_are_reproducible(self):
        """Test that the same seed yields the same deal."""
        first = Shoe(LocalRandomSource(seed=3), deck_count=1)
        second = Shoe(LocalRandomSource(seed=3), deck_count=1)
        assert await first.draw(10) == await second.draw(10)
