"""Exceptions raised by the blackjack engine."""


class BlackjackError(Exception):
    """Base class for engine errors."""


class InvariantViolation(BlackjackError, RuntimeError):
    """
    A caller broke the engine's contract.

    These describe states that cannot happen under correct usage and are not
    meant to be recovered from.
    """


class DeckExhaustedError(InvariantViolation):
    """The draw pile stayed empty after recycling the discards."""


class NotConfiguredError(InvariantViolation):
    """A round was requested before any game settings were chosen."""


class InsufficientFundsError(BlackjackError, ValueError):
    """A purchase or bet the current balance cannot cover."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"Need ${required} but only ${available} is available")
        self.required = required
        self.available = available
