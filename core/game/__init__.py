"""Game engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import Action, GameState
from core.game.engine import BlackjackGame, HandResult, RoundResult, TurnContext

__all__ = [
    "Action",
    "GameEvent",
    "EventType",
    "GameState",
    "BlackjackGame",
    "HandResult",
    "RoundResult",
    "TurnContext",
]
