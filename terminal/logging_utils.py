"""Logging setup for the terminal front end."""

import logging

from core.game.events import GameEvent

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

_event_logger = logging.getLogger("core.game.events")


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """
    Call once at program start.

    Logs go to ``log_file`` when given; otherwise to stderr, where the
    default WARNING level keeps them out of the game screen.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        filename=log_file,
    )


def log_event(event: GameEvent) -> None:
    """Event handler mirroring engine events to the log."""
    _event_logger.debug("%s %s", event.event_type.name, event.data)
