"""Round phases and player actions."""

from enum import Enum, auto


class GameState(Enum):
    """
    Round state machine states.

    Flow: IDLE → DEALING → PLAYER_TURN → DEALER_TURN → RESOLVING → ROUND_COMPLETE
    """

    # No round dealt yet
    IDLE = auto()

    # Cards being dealt and naturals checked
    DEALING = auto()

    # Player decisions, hand by hand
    PLAYER_TURN = auto()

    # Dealer draws to 17
    DEALER_TURN = auto()

    # Determining winners
    RESOLVING = auto()

    # Round settled and cards collected, ready for the next
    ROUND_COMPLETE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class Action(Enum):
    """Decisions available to the player on a hand."""

    HIT = "h"
    STAND = "s"
    DOUBLE = "d"
    SPLIT = "l"

    def __str__(self) -> str:
        return self.name.title()


# Valid state transitions
VALID_TRANSITIONS: dict[GameState, list[GameState]] = {
    GameState.IDLE: [GameState.DEALING],
    GameState.DEALING: [GameState.PLAYER_TURN, GameState.RESOLVING],  # RESOLVING on dealer BJ
    GameState.PLAYER_TURN: [GameState.DEALER_TURN],
    GameState.DEALER_TURN: [GameState.RESOLVING],
    GameState.RESOLVING: [GameState.ROUND_COMPLETE],
    GameState.ROUND_COMPLETE: [GameState.DEALING],
}


def is_valid_transition(from_state: GameState, to_state: GameState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
