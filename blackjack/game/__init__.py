"""Round engine, state, events and snapshots."""

from blackjack.game.events import EventType, GameEvent
from blackjack.game.state import GamePhase, RoundState, SettlementHandResult
from blackjack.game.snapshot import GameSnapshot, HandSnapshot, dump_snapshot, parse_snapshot
from blackjack.game.engine import BlackjackGame

__all__ = [
    "EventType",
    "GameEvent",
    "GamePhase",
    "RoundState",
    "SettlementHandResult",
    "GameSnapshot",
    "HandSnapshot",
    "dump_snapshot",
    "parse_snapshot",
    "BlackjackGame",
]
