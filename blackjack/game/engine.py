"""Blackjack round engine with state machine."""

import dataclasses
import logging
from decimal import Decimal
from typing import Any, Callable

from transitions import Machine

from blackjack.dealer import DealerPolicy
from blackjack.exceptions import PhaseError
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.snapshot import (
    GameSnapshot,
    parse_snapshot,
    snapshot_from_state,
    state_from_snapshot,
)
from blackjack.game.state import GamePhase, RoundState, SettlementHandResult
from blackjack.hand import Hand, evaluate
from blackjack.payout import ZERO, HandOutcome, compute_payout
from blackjack.shoe import Shoe
from config import GameConfig, config

logger = logging.getLogger(__name__)


def _to_decimal(amount: Decimal | int | str) -> Decimal:
    return amount if isinstance(amount, Decimal) else Decimal(str(amount))


def _signed(amount: Decimal) -> str:
    return f"+{amount}" if amount >= 0 else str(amount)


class BlackjackGame:
    """
    Blackjack round engine using a state machine.

    One instance owns one round at a time and is not safe for concurrent
    use; callers serialize operations. Every operation returns a fresh
    GameSnapshot. Calling an operation in the wrong phase raises PhaseError;
    a valid call that cannot apply to the current hand (e.g. doubling a
    three-card hand) returns the unchanged snapshot and records nothing.
    """

    # State machine states
    STATES = [phase.value for phase in GamePhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "_begin_round", "source": "*", "dest": "not_started"},
        {"trigger": "_cards_dealt", "source": "not_started", "dest": "player_acting"},
        {"trigger": "_player_done", "source": "player_acting", "dest": "dealer_acting"},
        {"trigger": "_all_hands_bust", "source": "player_acting", "dest": "settled"},
        {"trigger": "_dealer_done", "source": "dealer_acting", "dest": "settled"},
    ]

    def __init__(
        self,
        shoe: Shoe,
        dealer: DealerPolicy | None = None,
        game_config: GameConfig | None = None,
    ) -> None:
        """
        Initialize a new game.

        Args:
            shoe: Shoe that supplies every card for this game
            dealer: Dealer policy (built from the config's soft-17 rule if not provided)
            game_config: Table rules (uses global config if not provided)
        """
        self.config = game_config or config.game
        self.shoe = shoe
        self.dealer = dealer or DealerPolicy(
            shoe, hit_soft_17=self.config.dealer_hit_soft_17
        )
        self.round_state = RoundState(player_hands=[Hand()])
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=GamePhase.NOT_STARTED.value,
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_sync_phase",
        )

    @property
    def phase(self) -> GamePhase:
        """Get current phase as enum."""
        return GamePhase(self._machine_state)  # type: ignore[attr-defined]

    def _sync_phase(self) -> None:
        self.round_state.phase = self.phase

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to round events."""
        self.events.subscribe(handler, event_type)

    # Snapshots

    def snapshot(self) -> GameSnapshot:
        """Capture the current round state."""
        return snapshot_from_state(self.round_state)

    def refresh(self) -> GameSnapshot:
        """Re-emit the current state without changing it."""
        return self.snapshot()

    def load(self, snapshot: GameSnapshot | dict[str, Any] | str | bytes) -> None:
        """
        Replace the round state with a previously emitted snapshot.

        The new state is fully built before anything is replaced, so a bad
        snapshot leaves the current round untouched.

        Raises:
            SnapshotError: If the snapshot is missing or malformed
        """
        parsed = parse_snapshot(snapshot)
        restored = state_from_snapshot(parsed)
        self.round_state = restored
        self.machine.set_state(restored.phase.value)
        logger.debug("Loaded round in phase %s", restored.phase)

    def set_round_id(self, round_id: int | None) -> GameSnapshot:
        """Attach an external identifier (e.g. a persisted row id) to the round."""
        self.round_state.round_id = round_id
        return self.snapshot()

    # Round flow

    def new_round(
        self,
        starting_bankroll: Decimal | int | str,
        bet: Decimal | int | str,
    ) -> GameSnapshot:
        """
        Reset everything and start a round with one empty player hand.

        Valid from any phase.
        """
        bet = _to_decimal(bet)
        if bet <= 0:
            raise ValueError("Bet must be positive")

        self.round_state = RoundState(
            player_hands=[Hand()],
            bankroll=_to_decimal(starting_bankroll),
            current_bet=bet,
        )
        self._begin_round()
        self._record(
            EventType.ROUND_STARTED,
            "New round started",
            bankroll=self.round_state.bankroll,
            bet=bet,
        )
        return self.snapshot()

    async def deal_initial(self) -> GameSnapshot:
        """Deal player, dealer, player, dealer and open the player's turn."""
        self._require_phase("deal_initial", GamePhase.NOT_STARTED)
        state = self.round_state

        cards = await self.shoe.draw(4)

        player = state.player_hands[0]
        for card, hand in zip(cards, (player, state.dealer_hand, player, state.dealer_hand)):
            hand.add_card(card)

        if evaluate(player).is_blackjack:
            player.mark_completed()
            self._record(EventType.PLAYER_BLACKJACK, "Player blackjack!", hand_index=0)

        self._cards_dealt()
        self._advance_active_hand()
        return self.snapshot()

    async def hit(self) -> GameSnapshot:
        """Player hits (takes another card) on the active hand."""
        self._require_phase("hit", GamePhase.PLAYER_ACTING)
        state = self.round_state
        hand = state.active_hand
        if hand is None or hand.is_completed:
            return self.snapshot()

        drawn = await self.shoe.draw(1)
        if not drawn:
            return self.snapshot()

        hand.add_card(drawn[0])
        evaluation = evaluate(hand)
        if evaluation.is_bust:
            hand.mark_completed()
            self._record(
                EventType.PLAYER_BUSTS,
                "Hand bust",
                hand_index=state.active_hand_index,
                total=evaluation.total,
            )
        elif evaluation.is_blackjack:
            hand.mark_completed()
            self._record(
                EventType.PLAYER_BLACKJACK,
                "Hand blackjack",
                hand_index=state.active_hand_index,
            )

        self._after_player_action()
        return self.snapshot()

    def stand(self) -> GameSnapshot:
        """Player stands (keeps the active hand)."""
        self._require_phase("stand", GamePhase.PLAYER_ACTING)
        state = self.round_state
        hand = state.active_hand
        if hand is None or hand.is_completed:
            return self.snapshot()

        hand.mark_completed()
        self._record(
            EventType.PLAYER_STAND,
            "Stand",
            hand_index=state.active_hand_index,
            total=evaluate(hand).total,
        )
        self._after_player_action()
        return self.snapshot()

    async def split(self) -> GameSnapshot:
        """
        Split an equal-rank pair into two hands, one new card each.

        The two new hands take the original hand's place and the active
        index stays on the first of them.
        """
        self._require_phase("split", GamePhase.PLAYER_ACTING)
        state = self.round_state
        hand = state.active_hand
        if hand is None or hand.is_completed or not hand.is_pair:
            return self.snapshot()

        drawn = await self.shoe.draw(2)

        first = Hand(cards=[hand.cards[0]], was_split_child=True)
        second = Hand(cards=[hand.cards[1]], was_split_child=True)
        for new_hand, card in zip((first, second), drawn):
            new_hand.add_card(card)

        index = state.active_hand_index
        state.player_hands[index:index + 1] = [first, second]
        self._record(
            EventType.PLAYER_SPLIT,
            "Split pair",
            hand_index=index,
            totals=(evaluate(first).total, evaluate(second).total),
        )
        return self.snapshot()

    async def double(self) -> GameSnapshot:
        """Double the bet on a two-card hand, take exactly one card and finish the hand."""
        self._require_phase("double", GamePhase.PLAYER_ACTING)
        state = self.round_state
        hand = state.active_hand
        if hand is None or hand.is_completed or not hand.can_double:
            return self.snapshot()

        drawn = await self.shoe.draw(1)

        hand.mark_doubled()
        if drawn:
            hand.add_card(drawn[0])
        hand.mark_completed()
        self._record(
            EventType.PLAYER_DOUBLE,
            "Double down",
            hand_index=state.active_hand_index,
            total=evaluate(hand).total,
            new_bet=state.effective_bet(hand),
        )
        self._after_player_action()
        return self.snapshot()

    async def advance_dealer(self) -> GameSnapshot:
        """
        Play the dealer hand once every player hand is completed.

        Returns the unchanged snapshot while any player hand is still open.
        """
        self._require_phase("advance_dealer", GamePhase.PLAYER_ACTING)
        state = self.round_state
        if not state.all_hands_completed:
            return self.snapshot()

        self._player_done()
        # The dealer plays a copy so an interrupted turn leaves no partial cards
        working_hand = dataclasses.replace(state.dealer_hand, cards=list(state.dealer_hand.cards))
        try:
            result = await self.dealer.play(working_hand)
        except BaseException:
            self.machine.set_state(GamePhase.PLAYER_ACTING.value)
            self._sync_phase()
            raise

        state.dealer_hand = working_hand
        state.dealer_played = True
        state.dealer_transcript = list(result.steps)
        self._dealer_done()

        final = result.final_evaluation
        if final.is_bust:
            self._record(EventType.DEALER_BUSTS, "Dealer bust", total=final.total)
        else:
            soft = " (Soft)" if final.is_soft else ""
            self._record(
                EventType.DEALER_STANDS,
                f"Dealer stands on {final.total}{soft}",
                total=final.total,
                is_soft=final.is_soft,
            )
        return self.snapshot()

    def settle_round(self) -> GameSnapshot:
        """
        Pay out every player hand against the dealer's final hand.

        A round that already has settlement results is not paid twice; the
        unchanged snapshot is returned instead.
        """
        self._require_phase("settle_round", GamePhase.SETTLED, GamePhase.DEALER_ACTING)
        state = self.round_state
        if state.is_settled:
            return self.snapshot()

        dealer_evaluation = evaluate(state.dealer_hand)
        results = []
        for index, hand in enumerate(state.player_hands):
            bet = state.effective_bet(hand)
            payout = compute_payout(
                evaluate(hand), dealer_evaluation, bet, hand.was_split_child
            )
            results.append(
                SettlementHandResult(
                    hand_index=index,
                    outcome=payout.outcome,
                    bet=bet,
                    payout=payout.payout_amount,
                    net_delta=payout.net_delta,
                )
            )

        self._apply_settlement(results)
        return self.snapshot()

    # Internals

    def _after_player_action(self) -> None:
        self._advance_active_hand()
        self._settle_if_all_bust()

    def _advance_active_hand(self) -> None:
        """Move the active index past completed hands (possibly past the end)."""
        state = self.round_state
        while (
            state.active_hand_index < len(state.player_hands)
            and state.player_hands[state.active_hand_index].is_completed
        ):
            state.active_hand_index += 1

    def _settle_if_all_bust(self) -> None:
        """
        Settle immediately when every player hand has busted.

        The dealer never plays in this case and the hole card stays hidden.
        """
        state = self.round_state
        if self.phase == GamePhase.SETTLED or not state.player_hands:
            return
        if not state.all_hands_completed:
            return
        if not all(evaluate(hand).is_bust for hand in state.player_hands):
            return

        self._all_hands_bust()
        self._record(EventType.ALL_HANDS_BUST, "All player hands bust - round settled")

        results = []
        for index, hand in enumerate(state.player_hands):
            bet = state.effective_bet(hand)
            results.append(
                SettlementHandResult(
                    hand_index=index,
                    outcome=HandOutcome.BUST,
                    bet=bet,
                    payout=ZERO,
                    net_delta=-bet,
                )
            )
        self._apply_settlement(results)

    def _apply_settlement(self, results: list[SettlementHandResult]) -> None:
        state = self.round_state
        total = sum((r.net_delta for r in results), ZERO)
        state.settlement_results = results
        state.bankroll += total
        state.round_net_delta = total
        self._record(
            EventType.ROUND_SETTLED,
            f"Round settled (net {_signed(total)})",
            net=total,
            bankroll=state.bankroll,
        )
        logger.debug(
            "Round settled: %d hands, net %s, bankroll %s",
            len(results),
            _signed(total),
            state.bankroll,
        )

    def _record(self, event_type: EventType, message: str, **data: Any) -> None:
        """Append to the round's event log and notify subscribers."""
        self.round_state.events.append(message)
        event = self.events.emit_new(event_type, message, **data)
        logger.debug("%s", event)

    def _require_phase(self, operation: str, *allowed: GamePhase) -> None:
        if self.phase not in allowed:
            logger.warning("Rejected %s in phase %s", operation, self.phase)
            raise PhaseError(operation, self.phase, allowed)
