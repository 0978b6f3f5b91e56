"""Immutable, serializable snapshots of round state."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from blackjack.cards import Card
from blackjack.exceptions import SnapshotError
from blackjack.game.state import GamePhase, RoundState, SettlementHandResult
from blackjack.hand import Hand, evaluate
from blackjack.payout import HandOutcome


class HandEvaluationSnapshot(BaseModel):
    """Evaluation of a hand when the snapshot was taken."""

    model_config = ConfigDict(frozen=True)

    total: int
    is_soft: bool
    is_blackjack: bool
    is_bust: bool


class HandSnapshot(BaseModel):
    """A hand as card codes plus its flags."""

    model_config = ConfigDict(frozen=True)

    cards: tuple[str, ...] = ()
    evaluation: HandEvaluationSnapshot | None = None
    is_completed: bool = False
    was_split_child: bool = False
    has_doubled: bool = False

    @field_validator("cards")
    @classmethod
    def _valid_codes(cls, codes: tuple[str, ...]) -> tuple[str, ...]:
        for code in codes:
            Card.from_code(code)
        return codes


class SettlementResultSnapshot(BaseModel):
    """Settlement of one player hand."""

    model_config = ConfigDict(frozen=True)

    hand_index: int = Field(..., ge=0)
    outcome: HandOutcome
    bet: Decimal
    payout: Decimal
    net_delta: Decimal


class GameSnapshot(BaseModel):
    """
    Complete, externally storable round state.

    `model_dump(mode="json")` yields plain JSON types with decimals as
    strings, so a dump/parse round trip keeps money values exact.
    """

    model_config = ConfigDict(frozen=True)

    phase: GamePhase
    bankroll: Decimal
    current_bet: Decimal
    active_hand_index: int = Field(..., ge=0)
    player_hands: tuple[HandSnapshot, ...] = Field(..., min_length=1)
    dealer: HandSnapshot
    dealer_played: bool = False
    events: tuple[str, ...] = ()
    settlement_results: tuple[SettlementResultSnapshot, ...] = ()
    round_net_delta: Decimal = Decimal("0")
    round_id: int | None = None

    @model_validator(mode="after")
    def _consistent_indexes(self) -> "GameSnapshot":
        if self.active_hand_index > len(self.player_hands):
            raise ValueError(
                f"active_hand_index {self.active_hand_index} is past "
                f"{len(self.player_hands)} player hands"
            )
        for result in self.settlement_results:
            if result.hand_index >= len(self.player_hands):
                raise ValueError(f"settlement for unknown hand {result.hand_index}")
        return self

    @property
    def active_hand(self) -> HandSnapshot | None:
        if self.active_hand_index < len(self.player_hands):
            return self.player_hands[self.active_hand_index]
        return None

    @property
    def dealer_showing(self) -> tuple[str, ...]:
        """
        Dealer cards a renderer may reveal.

        The hole card stays hidden until the dealer has played, including
        rounds settled because every player hand busted.
        """
        if self.dealer_played:
            return self.dealer.cards
        return self.dealer.cards[:1]


def _snapshot_hand(hand: Hand) -> HandSnapshot:
    evaluation = evaluate(hand)
    return HandSnapshot(
        cards=tuple(card.code for card in hand.cards),
        evaluation=HandEvaluationSnapshot(
            total=evaluation.total,
            is_soft=evaluation.is_soft,
            is_blackjack=evaluation.is_blackjack,
            is_bust=evaluation.is_bust,
        ),
        is_completed=hand.is_completed,
        was_split_child=hand.was_split_child,
        has_doubled=hand.has_doubled,
    )


def _restore_hand(snapshot: HandSnapshot) -> Hand:
    # Evaluations are derived data and are recomputed, never restored
    return Hand(
        cards=[Card.from_code(code) for code in snapshot.cards],
        is_completed=snapshot.is_completed,
        was_split_child=snapshot.was_split_child,
        has_doubled=snapshot.has_doubled,
    )


def snapshot_from_state(state: RoundState) -> GameSnapshot:
    """Capture the round state as an immutable snapshot."""
    return GameSnapshot(
        phase=state.phase,
        bankroll=state.bankroll,
        current_bet=state.current_bet,
        active_hand_index=state.active_hand_index,
        player_hands=tuple(_snapshot_hand(h) for h in state.player_hands),
        dealer=_snapshot_hand(state.dealer_hand),
        dealer_played=state.dealer_played,
        events=tuple(state.events),
        settlement_results=tuple(
            SettlementResultSnapshot(
                hand_index=r.hand_index,
                outcome=r.outcome,
                bet=r.bet,
                payout=r.payout,
                net_delta=r.net_delta,
            )
            for r in state.settlement_results
        ),
        round_net_delta=state.round_net_delta,
        round_id=state.round_id,
    )


def state_from_snapshot(snapshot: GameSnapshot) -> RoundState:
    """
    Rebuild a fresh RoundState from a snapshot.

    The dealer transcript is not part of a snapshot and comes back empty.
    """
    return RoundState(
        player_hands=[_restore_hand(h) for h in snapshot.player_hands],
        dealer_hand=_restore_hand(snapshot.dealer),
        active_hand_index=snapshot.active_hand_index,
        bankroll=snapshot.bankroll,
        current_bet=snapshot.current_bet,
        phase=snapshot.phase,
        dealer_played=snapshot.dealer_played,
        events=list(snapshot.events),
        settlement_results=[
            SettlementHandResult(
                hand_index=r.hand_index,
                outcome=r.outcome,
                bet=r.bet,
                payout=r.payout,
                net_delta=r.net_delta,
            )
            for r in snapshot.settlement_results
        ],
        round_net_delta=snapshot.round_net_delta,
        round_id=snapshot.round_id,
    )


def dump_snapshot(snapshot: GameSnapshot) -> dict[str, Any]:
    """Serialize a snapshot to plain JSON-compatible data."""
    return snapshot.model_dump(mode="json")


def parse_snapshot(data: GameSnapshot | dict[str, Any] | str | bytes | None) -> GameSnapshot:
    """
    Validate stored data as a snapshot.

    Args:
        data: A snapshot, its dumped dict, or its JSON text

    Raises:
        SnapshotError: If the data is missing or malformed
    """
    if data is None:
        raise SnapshotError("No snapshot to load")
    if isinstance(data, GameSnapshot):
        return data
    try:
        if isinstance(data, (str, bytes)):
            return GameSnapshot.model_validate_json(data)
        return GameSnapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e


def snapshot_to_json(snapshot: GameSnapshot) -> str:
    """Serialize a snapshot to compact JSON text."""
    return snapshot.model_dump_json()
