"""Tests for dealer auto-play."""

import pytest

from blackjack.dealer import DealerPolicy
from blackjack.hand import evaluate


def _eval(make_hand, *codes):
    return evaluate(make_hand(*codes))


class TestShouldHit:
    """Tests for the dealer hit rule."""

    def test_hits_below_17(self, make_shoe, make_hand):
        """Test that the dealer hits 16."""
        dealer = DealerPolicy(make_shoe(), hit_soft_17=False)
        assert dealer.should_hit(_eval(make_hand, "0S", "6H"))

    def test_stands_on_hard_17(self, make_shoe, make_hand):
        """Test that hard 17 always stands."""
        for flag in (False, True):
            dealer = DealerPolicy(make_shoe(), hit_soft_17=flag)
            assert not dealer.should_hit(_eval(make_hand, "0S", "7H"))

    def test_soft_17_depends_on_rule(self, make_shoe, make_hand):
        """Test that soft 17 is hit only under H17."""
        soft_17 = _eval(make_hand, "AS", "6H")
        assert not DealerPolicy(make_shoe(), hit_soft_17=False).should_hit(soft_17)
        assert DealerPolicy(make_shoe(), hit_soft_17=True).should_hit(soft_17)

    def test_stands_above_17(self, make_shoe, make_hand):
        """Test that soft 18 stands even under H17."""
        dealer = DealerPolicy(make_shoe(), hit_soft_17=True)
        assert not dealer.should_hit(_eval(make_hand, "AS", "7H"))

    def test_never_hits_bust(self, make_shoe, make_hand):
        """Test that a busted hand never draws."""
        dealer = DealerPolicy(make_shoe(), hit_soft_17=True)
        assert not dealer.should_hit(_eval(make_hand, "0S", "6H", "9C"))


class TestDealerPlay:
    """Tests for DealerPolicy.play."""

    @pytest.mark.asyncio
    async def test_hard_17_stands(self, make_shoe, make_hand):
        """Test that hard 17 takes no card."""
        shoe = make_shoe("5C")
        hand = make_hand("0S", "7H")
        result = await DealerPolicy(shoe, hit_soft_17=True).play(hand)

        assert len(result.steps) == 1
        assert result.final_evaluation.total == 17
        assert hand.is_completed
        assert len(hand) == 2

    @pytest.mark.asyncio
    async def test_hits_soft_17_when_enabled(self, make_shoe, make_hand):
        """Test that H17 draws once on A-6 and stands on 19."""
        shoe = make_shoe("2C")
        hand = make_hand("AS", "6H")
        result = await DealerPolicy(shoe, hit_soft_17=True).play(hand)

        assert len(result.steps) == 2
        assert result.steps[1].drew_card
        assert result.steps[1].card.code == "2C"
        assert result.final_evaluation.total == 19
        assert not result.final_evaluation.is_bust

    @pytest.mark.asyncio
    async def test_stands_soft_17_when_disabled(self, make_shoe, make_hand):
        """Test that S17 stands on A-6 without drawing."""
        shoe = make_shoe("2C")
        hand = make_hand("AS", "6H")
        result = await DealerPolicy(shoe, hit_soft_17=False).play(hand)

        assert len(result.steps) == 1
        assert result.final_evaluation.total == 17
        assert result.final_evaluation.is_soft

    @pytest.mark.asyncio
    async def test_draws_until_17(self, make_shoe, make_hand):
        """Test a multi-card dealer turn and its transcript."""
        shoe = make_shoe("2C", "3D", "4H")
        hand = make_hand("5S", "4H")
        result = await DealerPolicy(shoe, hit_soft_17=False).play(hand)

        assert [step.total for step in result.steps] == [9, 11, 14, 18]
        assert [step.step_number for step in result.steps] == [0, 1, 2, 3]
        assert not result.steps[0].drew_card
        assert all(step.drew_card for step in result.steps[1:])
        assert result.final_evaluation.total == 18

    @pytest.mark.asyncio
    async def test_dealer_bust(self, make_shoe, make_hand):
        """Test that the dealer stops once bust."""
        shoe = make_shoe("KC", "5D")
        hand = make_hand("0S", "6H")
        result = await DealerPolicy(shoe, hit_soft_17=False).play(hand)

        assert result.final_evaluation.is_bust
        assert result.final_evaluation.total == 26
        assert len(hand) == 3

    @pytest.mark.asyncio
    async def test_natural_never_draws(self, make_shoe, make_hand):
        """Test that a dealer blackjack ends the turn immediately."""
        shoe = make_shoe("5C")
        hand = make_hand("AS", "KH")
        result = await DealerPolicy(shoe, hit_soft_17=True).play(hand)

        assert len(result.steps) == 1
        assert result.final_evaluation.is_blackjack
        assert shoe.refills == 0

    @pytest.mark.asyncio
    async def test_exhausted_shoe_ends_turn(self, make_shoe, make_hand):
        """Test that an empty draw stops the dealer short of 17."""
        shoe = make_shoe()
        hand = make_hand("0S", "2H")
        result = await DealerPolicy(shoe, hit_soft_17=False).play(hand)

        assert len(result.steps) == 1
        assert result.final_evaluation.total == 12
        assert hand.is_completed

    def test_rule_defaults_to_config(self, make_shoe):
        """Test that the soft-17 rule comes from config when omitted."""
        from config import config

        assert DealerPolicy(make_shoe()).hit_soft_17 == config.game.dealer_hit_soft_17
