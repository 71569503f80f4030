"""Fixed table rules and per-round game settings."""

from dataclasses import dataclass

# Bankroll
STARTING_BALANCE = 1000
MIN_BET = 50
HISTORY_LIMIT = 128

# Table limits
MAX_DECKS = 16
MAX_HANDS = 7

# Dealer stands on any total of 17 or more
DEALER_STANDS_ON = 17
BLACKJACK = 21

# Payout weights, in units of the bet (the stake is included)
BLACKJACK_PAYOUT = 1.5
DOUBLE_PAYOUT = 4.0
WIN_PAYOUT = 2.0
PUSH_PAYOUT = 1.0


@dataclass(frozen=True)
class GameSettings:
    """
    Table configuration chosen before a round.

    Changing either value rebuilds the deck or the hand set.
    """

    deck_count: int = 1
    hand_count: int = 1

    def __post_init__(self) -> None:
        """Validate the table limits."""
        if not 1 <= self.deck_count <= MAX_DECKS:
            raise ValueError(f"deck_count must be between 1 and {MAX_DECKS}")
        if not 1 <= self.hand_count <= MAX_HANDS:
            raise ValueError(f"hand_count must be between 1 and {MAX_HANDS}")

    def round_cost(self, bet: int) -> int:
        """Return the price of buying every hand at ``bet`` each."""
        return bet * self.hand_count
