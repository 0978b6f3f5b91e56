"""Exceptions raised by the blackjack engine."""


class BlackjackError(Exception):
    """Base class for all engine errors."""


class PhaseError(BlackjackError):
    """An operation was invoked outside the phase(s) it is valid in."""

    def __init__(self, operation: str, phase: object, allowed: tuple = ()) -> None:
        self.operation = operation
        self.phase = phase
        self.allowed = tuple(allowed)
        allowed_str = ", ".join(str(p) for p in self.allowed) or "none"
        super().__init__(
            f"{operation} is not valid in phase {phase} (allowed: {allowed_str})"
        )


class HandCompletedError(BlackjackError):
    """A card was added to a hand that is already completed."""


class SnapshotError(BlackjackError):
    """A snapshot is malformed, incomplete, or inconsistent."""


class CardSourceError(BlackjackError):
    """The card source failed to create a shoe or return cards."""
