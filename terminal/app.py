"""Menus and the session controller for terminal blackjack."""

import logging
import sys
from random import Random

from config import AppConfig, GameConfig, config
from core.errors import InsufficientFundsError
from core.game.engine import BlackjackGame, TurnContext
from core.game.events import EventType, GameEvent
from core.game.state import Action
from core.rules import GameSettings
from core.session import ConfiguredSession, Session
from terminal.history_view import HistoryView
from terminal.logging_utils import log_event, setup_logging
from terminal.prompts import Prompter
from terminal.render import Renderer, format_values
from terminal.storage import SaveFile, StorageError

logger = logging.getLogger(__name__)

ACTION_LABELS = {
    Action.HIT: "[H]it",
    Action.STAND: "[S]tand",
    Action.DOUBLE: "[D]ouble",
    Action.SPLIT: "sp[L]it",
}


class BlackjackApp:
    """
    Session controller.

    Loads the save at start, buys hands and pays winnings around each round,
    and saves on exit.
    """

    def __init__(
        self,
        prompter: Prompter,
        renderer: Renderer,
        save_file: SaveFile,
        rng: Random | None = None,
        limits: GameConfig | None = None,
    ) -> None:
        self.prompter = prompter
        self.renderer = renderer
        self.save_file = save_file
        self.rng = rng
        self.limits = limits or GameConfig()
        self.session = Session()

    @classmethod
    def from_config(cls, app_config: AppConfig = config) -> "BlackjackApp":
        return cls(
            prompter=Prompter(),
            renderer=Renderer(
                color=app_config.display.color,
                clear_screen=app_config.display.clear_screen,
            ),
            save_file=SaveFile(app_config.storage.save_path),
            limits=app_config.game,
        )

    def load(self) -> None:
        """Load the saved session, falling back to a fresh one."""
        try:
            self.session = self.save_file.load_session()
        except StorageError as e:
            self.session = Session()
            self.renderer.write(str(e))
            self.prompter.pause(
                "Failed to load from save file. Generating a new one.\nEnter to continue..."
            )

    def save(self) -> bool:
        """Save the session. Failures are reported, not raised."""
        try:
            self.save_file.save_session(self.session)
        except StorageError as e:
            self.renderer.write(str(e))
            return False
        return True

    def run(self) -> None:
        """Main menu loop."""
        self.load()
        while True:
            choice = self.main_menu()
            if choice == "1":
                self.new_game()
            elif choice == "2":
                self.replay()
            elif choice == "3":
                HistoryView(self.session.bank, self.prompter, self.renderer).run()
            else:
                self.save()
                return

    def main_menu(self) -> str:
        can_replay = self.session.can_replay
        self.renderer.clear()
        self.renderer.write("--Terminal Blackjack--")
        self.renderer.write(f"Balance: ${self.session.bank.balance}\n")
        self.renderer.write("1. Play Game")
        if can_replay:
            settings = self.session.settings
            self.renderer.write(
                f"2. Play Again ({settings.deck_count} decks, "
                f"{settings.hand_count} hands at ${self.session.bank.cur_bet})"
            )
        else:
            self.renderer.write("2. Play Again (unavailable)")
        self.renderer.write("3. Transaction History")
        self.renderer.write("4. Exit")

        options = {"1": "1", "3": "3", "4": "4"}
        if can_replay:
            options["2"] = "2"
        return self.prompter.choose(":: ", options)

    def new_game(self) -> None:
        """Start from fresh settings."""
        self.ensure_balance()
        chosen = self.ask_settings()
        if chosen is None:
            return
        settings, bet = chosen
        self.play(self.session.configure(settings, bet, rng=self.rng))

    def replay(self) -> None:
        """Play again with the last settings and bet."""
        self.play(self.session.resume(rng=self.rng))

    def ensure_balance(self) -> None:
        if self.session.ensure_balance():
            self.renderer.clear()
            self.prompter.pause(
                f"You ran out of money... You've now reset {self.session.bank.resets} times."
                "\n\nEnter to continue..."
            )

    def ask_settings(self) -> tuple[GameSettings, int] | None:
        """Ask for deck count, hand count and bet, then confirm."""
        balance = self.session.bank.balance
        limits = self.limits
        max_hands = min(limits.max_hands, balance // limits.min_bet)

        self.renderer.clear()
        self.renderer.write(f"You have ${balance}.\n")
        deck_count = self.prompter.read_int(
            f"Decks to use (1-{limits.max_decks}): ", 1, limits.max_decks
        )
        hand_count = self.prompter.read_int(f"Hands to play (1-{max_hands}): ", 1, max_hands)
        max_bet = balance // hand_count
        bet = self.prompter.read_int(
            f"Amount to bet (${limits.min_bet}-${max_bet}): $", limits.min_bet, max_bet
        )

        settings = GameSettings(deck_count=deck_count, hand_count=hand_count)
        cost = settings.round_cost(bet)
        self.renderer.clear()
        self.renderer.write(f"Balance remaining after start: ${balance - cost}")
        self.renderer.write("Playing with:")
        self.renderer.write(f"{deck_count} decks,")
        self.renderer.write(f"{hand_count} hands at ${bet} each (${cost}).\n")
        self.renderer.write("1. Confirm")
        self.renderer.write("2. Cancel")
        if not self.prompter.confirm(":: "):
            return None
        return settings, bet

    def play(self, table: ConfiguredSession) -> None:
        """Play a round, then offer more rounds until the player leaves."""
        self.watch(table.game)
        self.play_round(table)

        while True:
            bank = self.session.bank
            cost = table.round_cost
            self.renderer.clear()
            self.renderer.write(f"You now have ${bank.balance}")
            if table.can_afford_round:
                self.renderer.write(
                    f"It costs ${cost} to play {table.settings.hand_count} more hands"
                )
                self.renderer.write(f"You will be left with ${bank.balance - cost}\n")
                self.renderer.write("1. Play Again")
            else:
                self.renderer.write(
                    f"It costs ${cost} to play {table.settings.hand_count} more hands."
                )
                self.renderer.write(
                    "You do not have enough to play again, please change settings "
                    "or incur a balance reset.\n"
                )
                self.renderer.write("1. Reset Balance")
            self.renderer.write("2. Change Settings")
            self.renderer.write("3. Main Menu")

            choice = self.prompter.choose(":: ", {"1": "1", "2": "2", "3": "3"})
            if choice == "1":
                if table.can_afford_round:
                    self.play_round(table)
                else:
                    bank.reset_balance()
                    self.renderer.clear()
                    self.prompter.pause(
                        f"Balance reset to ${bank.balance}. You now have {bank.resets} resets."
                        "\n\nEnter to continue..."
                    )
            elif choice == "2":
                self.ensure_balance()
                chosen = self.ask_settings()
                if chosen is not None:
                    settings, bet = chosen
                    table.update_settings(settings, bet=bet)
                    self.play_round(table)
            else:
                return

    def play_round(self, table: ConfiguredSession) -> None:
        try:
            summary = table.play_round(self.decide)
        except InsufficientFundsError as e:
            self.renderer.write(str(e))
            self.prompter.pause()
            return

        self.renderer.round_result(summary.result)
        self.renderer.write(f"\nYou spent ${summary.spent} and won back ${summary.earned}")
        self.renderer.write(f"You now have ${summary.balance}\n")
        self.prompter.pause()

    def decide(self, context: TurnContext) -> Action:
        """Ask the player what to do with the current hand."""
        self.renderer.turn(context)
        menu = "\n".join(ACTION_LABELS[action] for action in context.actions)
        options = {action.value: action for action in context.actions}
        return self.prompter.choose(f"{menu}\n:: ", options, remember="action")

    def watch(self, game: BlackjackGame) -> None:
        """Show engine events that happen without a player decision."""
        game.subscribe(log_event)
        game.subscribe(self._on_bust, EventType.PLAYER_BUSTS)
        game.subscribe(self._on_blackjack, EventType.PLAYER_BLACKJACK)

    def _on_bust(self, event: GameEvent) -> None:
        hand = event.data["hand_index"] + 1
        values = format_values(event.data["values"])
        self.renderer.write(f"Hand {hand} ({values}) {self.renderer.tag('bust', 'has busted')}.")
        self.prompter.pause()

    def _on_blackjack(self, event: GameEvent) -> None:
        hand = event.data["hand_index"] + 1
        self.renderer.write(f"Hand {hand} has {self.renderer.tag('blackjack')}!")


def main() -> int:
    """Console entry point."""
    level = "DEBUG" if config.debug else config.logging.level
    setup_logging(level, config.logging.file)
    app = BlackjackApp.from_config(config)
    try:
        app.run()
    except (KeyboardInterrupt, EOFError):
        # Abandoned rounds are not saved
        logger.info("Interrupted, exiting without saving")
        print()
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
