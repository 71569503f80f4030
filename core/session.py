"""Session state carried between rounds: the bank and the last table settings."""

import logging
from dataclasses import dataclass
from random import Random

from core.bank import Bank
from core.errors import InsufficientFundsError, NotConfiguredError
from core.game.engine import BlackjackGame, DecisionSource, RoundResult
from core.rules import MIN_BET, GameSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundSummary:
    """Money moved by one round."""

    result: RoundResult
    spent: int
    earned: int
    balance: int


class Session:
    """
    Persistent player state.

    Holds no game: rounds are played through a ``ConfiguredSession``, which
    can only be created once settings exist.
    """

    def __init__(
        self,
        bank: Bank | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.bank = bank or Bank()
        self.settings = settings

    @property
    def needs_reset(self) -> bool:
        """Check if the balance is below the cheapest playable round."""
        return self.bank.balance < MIN_BET

    def ensure_balance(self) -> bool:
        """Reset an exhausted balance. Returns True if a reset happened."""
        if not self.needs_reset:
            return False
        self.bank.reset_balance()
        return True

    @property
    def can_replay(self) -> bool:
        """Check if the last settings and bet can be played again."""
        if self.settings is None or self.bank.cur_bet < MIN_BET:
            return False
        return self.bank.can_afford(self.settings.hand_count)

    def configure(
        self,
        settings: GameSettings,
        bet: int,
        rng: Random | None = None,
    ) -> "ConfiguredSession":
        """Choose new table settings and bet, returning a playable session."""
        self.bank.place_bet(bet)
        self.settings = settings
        return ConfiguredSession(self, settings, rng=rng)

    def resume(self, rng: Random | None = None) -> "ConfiguredSession":
        """
        Continue with the last settings.

        Raises:
            NotConfiguredError: if no settings were ever chosen
        """
        if self.settings is None:
            raise NotConfiguredError("No game settings to resume with")
        return ConfiguredSession(self, self.settings, rng=rng)


class ConfiguredSession:
    """A session with table settings and a game to play them on."""

    def __init__(
        self,
        session: Session,
        settings: GameSettings,
        rng: Random | None = None,
    ) -> None:
        self.session = session
        self.settings = settings
        self.game = BlackjackGame(settings, rng=rng)

    @property
    def bank(self) -> Bank:
        return self.session.bank

    @property
    def round_cost(self) -> int:
        """Return the price of the hands bought up front."""
        return self.settings.round_cost(self.bank.cur_bet)

    @property
    def can_afford_round(self) -> bool:
        return self.bank.can_afford(self.settings.hand_count)

    def update_settings(self, settings: GameSettings, bet: int | None = None) -> None:
        """Change settings between rounds, keeping the same deck where possible."""
        if bet is not None:
            self.bank.place_bet(bet)
        self.game.update_settings(settings)
        self.settings = settings
        self.session.settings = settings

    def play_round(self, decide: DecisionSource) -> RoundSummary:
        """
        Buy the hands, play a round and collect the winnings.

        Every bet the remaining balance covers becomes a spare hand the player
        may spend on a double or split; only the spares actually used are paid
        for after the round.

        Raises:
            InsufficientFundsError: if the hands cannot be bought
        """
        if not self.can_afford_round:
            raise InsufficientFundsError(
                required=self.round_cost, available=self.bank.balance
            )

        spent = self.bank.buy(self.settings.hand_count)
        spare_hands = self.bank.affordable_hands()

        result = self.game.play_round(spare_hands, decide)

        if result.hands_bought:
            spent += self.bank.buy(result.hands_bought)

        earned = 0
        if result.payout > 0:
            earned = self.bank.win(result.payout)

        logger.info(
            "Round finished: spent $%d, earned $%d, balance $%d",
            spent,
            earned,
            self.bank.balance,
        )
        return RoundSummary(
            result=result,
            spent=spent,
            earned=earned,
            balance=self.bank.balance,
        )
