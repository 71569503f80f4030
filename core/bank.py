"""Betting ledger: balance, current bet and a capped transaction history."""

import logging
from collections import deque
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from enum import Enum

from core.errors import InsufficientFundsError
from core.rules import HISTORY_LIMIT, MIN_BET, STARTING_BALANCE

logger = logging.getLogger(__name__)


class TransactionType(Enum):
    """Kinds of ledger entries."""

    SPEND = "spend"
    EARN = "earn"
    RESET = "reset"


@dataclass(frozen=True)
class Transaction:
    """A single ledger entry and the balance it left behind."""

    amount: int
    type: TransactionType
    balance_after: int


def _recent(transactions=()) -> deque:
    return deque(transactions, maxlen=HISTORY_LIMIT)


@dataclass
class BankHistory:
    """
    Running totals plus the most recent transactions.

    Only the last 128 transactions are kept; the oldest are dropped first.
    """

    resets: int = 0
    total_spent: int = 0
    total_earned: int = 0
    hands_bought: int = 0
    recent_transactions: deque = field(default_factory=_recent)

    def __post_init__(self) -> None:
        if (
            not isinstance(self.recent_transactions, deque)
            or self.recent_transactions.maxlen != HISTORY_LIMIT
        ):
            self.recent_transactions = _recent(self.recent_transactions)

    def record(self, amount: int, kind: TransactionType, balance: int) -> Transaction:
        """Add a transaction and update the matching counter."""
        if kind is TransactionType.SPEND:
            self.total_spent += amount
        elif kind is TransactionType.EARN:
            self.total_earned += amount
        else:
            self.resets += 1

        transaction = Transaction(amount=amount, type=kind, balance_after=balance)
        self.recent_transactions.append(transaction)
        return transaction

    def newest_first(self) -> list[Transaction]:
        """Return the recent transactions, most recent first."""
        return list(reversed(self.recent_transactions))


@dataclass
class Bank:
    """
    Player money.

    The bank knows nothing about cards: the session buys hands before a round
    and pays out the engine's payout weight afterwards.
    """

    balance: int = STARTING_BALANCE
    cur_bet: int = 0
    history: BankHistory = field(default_factory=BankHistory)

    def place_bet(self, amount: int) -> None:
        """
        Set the bet per hand.

        Raises:
            ValueError: if the bet is below the table minimum
        """
        if amount < MIN_BET:
            raise ValueError(f"Bet must be at least ${MIN_BET}")
        self.cur_bet = amount

    def cost(self, hands: int) -> int:
        """Return the price of ``hands`` hands at the current bet."""
        return self.cur_bet * hands

    def can_afford(self, hands: int) -> bool:
        """Check if ``hands`` hands can be bought without going negative."""
        return self.cost(hands) <= self.balance

    def affordable_hands(self) -> int:
        """Return how many more hands the balance covers at the current bet."""
        if self.cur_bet <= 0:
            return 0
        return self.balance // self.cur_bet

    def buy(self, hands: int) -> int:
        """
        Pay for ``hands`` hands at the current bet.

        Returns:
            The amount debited

        Raises:
            InsufficientFundsError: if the balance cannot cover the purchase
        """
        amount = self.cost(hands)
        if amount > self.balance:
            raise InsufficientFundsError(required=amount, available=self.balance)

        self.balance -= amount
        self.history.hands_bought += hands
        self.history.record(amount, TransactionType.SPEND, self.balance)
        logger.debug("Bought %d hand(s) for $%d, balance $%d", hands, amount, self.balance)
        return amount

    def win(self, weight: float) -> int:
        """
        Collect a payout of ``weight`` bets, dropping any fractional dollar.

        Returns:
            The amount credited
        """
        amount = int(
            (Decimal(self.cur_bet) * Decimal(str(weight))).quantize(
                Decimal("1"), rounding=ROUND_DOWN
            )
        )
        self.balance += amount
        self.history.record(amount, TransactionType.EARN, self.balance)
        logger.debug("Won $%d (weight %s), balance $%d", amount, weight, self.balance)
        return amount

    def reset_balance(self) -> None:
        """Restore the starting stake after running out of money."""
        self.balance = STARTING_BALANCE
        self.history.record(0, TransactionType.RESET, self.balance)
        logger.info("Balance reset to $%d (%d resets)", self.balance, self.history.resets)

    @property
    def resets(self) -> int:
        return self.history.resets
