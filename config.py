"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field

from core.rules import MAX_DECKS, MAX_HANDS, MIN_BET, STARTING_BALANCE


def _default_save_path() -> str:
    """Resolve the save file location from BLACKJACK_SAVE_PATH."""
    path = os.getenv("BLACKJACK_SAVE_PATH", "~/.blackjack_save.json")
    return os.path.expanduser(path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class StorageConfig:
    """Save file configuration."""

    save_path: str = field(default_factory=_default_save_path)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())
    file: str | None = field(default_factory=lambda: os.getenv("LOG_FILE") or None)


@dataclass(frozen=True)
class DisplayConfig:
    """Terminal output configuration."""

    color: bool = field(default_factory=lambda: "NO_COLOR" not in os.environ)
    clear_screen: bool = field(
        default_factory=lambda: _env_flag("BLACKJACK_CLEAR_SCREEN", "true")
    )


@dataclass(frozen=True)
class GameConfig:
    """Table limits shown to the player."""

    starting_balance: int = STARTING_BALANCE
    min_bet: int = MIN_BET
    max_decks: int = MAX_DECKS
    max_hands: int = MAX_HANDS


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))

    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    game: GameConfig = field(default_factory=GameConfig)


# Global configuration instance
config = AppConfig()
