"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str = "false") -> bool:
    """Read a boolean environment variable."""
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class GameConfig:
    """Table rules for the round engine."""

    default_deck_count: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_DECK_COUNT", "6"))
    )
    dealer_hit_soft_17: bool = field(
        default_factory=lambda: _env_bool("BLACKJACK_DEALER_HIT_SOFT_17")
    )

    def __post_init__(self) -> None:
        """Validate rule values."""
        if self.default_deck_count < 1:
            raise ValueError("default_deck_count must be at least 1")


@dataclass(frozen=True)
class DeckApiConfig:
    """External deck API connection settings."""

    base_url: str = field(
        default_factory=lambda: os.getenv("DECK_API_URL", "https://deckofcardsapi.com")
    )
    timeout: float = field(
        default_factory=lambda: float(os.getenv("DECK_API_TIMEOUT", "10"))
    )
    max_attempts: int = 3  # initial request + 2 retries
    backoff: float = 0.2  # seconds, multiplied by the attempt number


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    game: GameConfig = field(default_factory=GameConfig)
    deck_api: DeckApiConfig = field(default_factory=DeckApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
config = AppConfig()
