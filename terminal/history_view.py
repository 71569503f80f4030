"""Scrollable ledger history."""

from core.bank import Bank
from terminal.prompts import Prompter
from terminal.render import Renderer

PAGE_SIZE = 10

HELP_TEXT = (
    "Shows the (up to) 128 most recent transactions. Commands:\n"
    "\th - help\n"
    "\tq - quit\n"
    "\tj - scroll down\n"
    "\tk - scroll up\n"
    "\ts - stats"
)


class HistoryView:
    """Browse the bank's recent transactions, newest first."""

    def __init__(self, bank: Bank, prompter: Prompter, renderer: Renderer) -> None:
        self.bank = bank
        self.prompter = prompter
        self.renderer = renderer
        self.position = 0

    @property
    def max_position(self) -> int:
        return max(len(self.bank.history.recent_transactions) - PAGE_SIZE, 0)

    def scroll(self, step: int) -> None:
        self.position = min(max(self.position + step, 0), self.max_position)

    def render_page(self) -> None:
        transactions = self.bank.history.newest_first()
        visible = transactions[self.position:self.position + PAGE_SIZE]

        self.renderer.clear()
        self.renderer.write("Transaction History (h for help):")
        if not transactions:
            self.renderer.write("No transactions yet.")
        for ndx, transaction in enumerate(visible, start=self.position + 1):
            self.renderer.write(f"{ndx}: {self.renderer.transaction(transaction)}")

    def render_stats(self) -> None:
        history = self.bank.history
        self.renderer.clear()
        self.renderer.write(f"Total Resets: {history.resets}")
        self.renderer.write(f"Total Won: ${history.total_earned}")
        self.renderer.write(f"Total Spent: ${history.total_spent}")
        self.renderer.write(f"Hands Bought: {history.hands_bought}")
        self.prompter.pause("\nEnter to continue...")

    def run(self) -> None:
        """Run until the player quits."""
        while True:
            self.render_page()
            command = self.prompter.choose(
                ":: ", {"j": "j", "k": "k", "s": "s", "h": "h", "q": "q"}
            )
            if command == "q":
                return
            if command == "j":
                self.scroll(1)
            elif command == "k":
                self.scroll(-1)
            elif command == "s":
                self.render_stats()
            else:
                self.renderer.clear()
                self.renderer.write(HELP_TEXT)
                self.prompter.pause("\nEnter to continue...")
