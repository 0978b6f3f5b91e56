"""Round events for the event log and subscribers."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of round events."""

    # Round flow events
    ROUND_STARTED = auto()
    ROUND_SETTLED = auto()
    ALL_HANDS_BUST = auto()

    # Player events
    PLAYER_BLACKJACK = auto()
    PLAYER_BUSTS = auto()
    PLAYER_STAND = auto()
    PLAYER_SPLIT = auto()
    PLAYER_DOUBLE = auto()

    # Dealer events
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable round event.

    The message is the human-readable line recorded in the round's event
    log; `data` carries structured details for subscribers.
    """

    event_type: EventType
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.message}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Fan-out of round events to subscribers.

    Handlers registered for a specific EventType run before catch-all
    handlers registered with `event_type=None`.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Register a handler.

        Args:
            handler: Called synchronously with each matching event
            event_type: Only deliver this type; None delivers every event
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Unsubscribe a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Emit an event to type-specific handlers, then catch-all handlers."""
        for handler in self._handlers.get(event.event_type, []):
            handler(event)
        for handler in self._handlers.get(None, []):
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        message: str,
        **data: Any,
    ) -> GameEvent:
        """
        Build an event from its parts and emit it.

        Returns:
            The emitted event
        """
        event = GameEvent(event_type=event_type, message=message, data=data)
        self.emit(event)
        return event
