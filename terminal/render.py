"""Text rendering with ANSI styling."""

from typing import Callable, Iterable

from core.bank import Transaction, TransactionType
from core.cards import Card, Suit
from core.game.engine import RoundResult, TurnContext
from core.hand import Hand, Outcome

CSI = "\033["
RESET = CSI + "0m"

# 256-colour foreground codes
SUIT_COLORS = {
    Suit.SPADES: 51,  # cyan
    Suit.HEARTS: 206,  # pink
    Suit.DIAMONDS: 171,  # magenta
    Suit.CLUBS: 159,  # light blue
}

TAG_COLORS = {
    "win": 40,
    "loss": 196,
    "bust": 160,
    "blackjack": 220,
    "push": 214,
}

OUTCOME_TAGS = {
    Outcome.BLACKJACK: ("blackjack", "BLACKJACK"),
    Outcome.DOUBLE_WIN: ("win", "WIN (doubled)"),
    Outcome.WIN: ("win", "WIN"),
    Outcome.PUSH: ("push", "PUSH"),
    Outcome.LOSS: ("loss", "LOSS"),
    Outcome.BUST: ("bust", "BUST"),
}


def format_values(values: Iterable[int]) -> str:
    """Join totals as '7, 17'."""
    return ", ".join(str(v) for v in values)


class Renderer:
    """Output sink: styled text written through ``write``."""

    def __init__(
        self,
        write: Callable[[str], None] = print,
        color: bool = True,
        clear_screen: bool = True,
    ) -> None:
        self._write = write
        self.color = color
        self.clear_screen = clear_screen

    def write(self, text: str = "") -> None:
        self._write(text)

    def clear(self) -> None:
        if self.clear_screen:
            self._write(CSI + "H" + CSI + "2J")

    def _paint(self, text: str, code: int, bold: bool = False) -> str:
        if not self.color:
            return text
        prefix = CSI + f"38;5;{code}m"
        if bold:
            prefix += CSI + "1m"
        return f"{prefix}{text}{RESET}"

    def tag(self, kind: str, text: str | None = None) -> str:
        """Style a win / loss / bust / blackjack / push label."""
        return self._paint(text or kind.upper(), TAG_COLORS[kind], bold=True)

    def card(self, card: Card) -> str:
        return self._paint(str(card), SUIT_COLORS[card.suit])

    def cards(self, cards: Iterable[Card]) -> str:
        return " ".join(self.card(c) for c in cards)

    def hand(self, hand: Hand) -> str:
        """Cards followed by the legal totals, or a bust / blackjack tag."""
        if hand.is_blackjack:
            status = self.tag("blackjack")
        elif hand.is_busted:
            status = f"{self.tag('bust')} ({format_values(hand.values)})"
        else:
            status = format_values(hand.legal_values)
            if hand.doubled:
                status += ", doubled"
        return f"{self.cards(hand.cards)} ; ({status})"

    def transaction(self, transaction: Transaction) -> str:
        if transaction.type is TransactionType.SPEND:
            amount = self._paint(f"-${transaction.amount}", 196)
        elif transaction.type is TransactionType.EARN:
            amount = self._paint(f"+${transaction.amount}", 40)
        else:
            amount = self._paint("Bank Reset", 214)
        return f"{amount} -> ${transaction.balance_after}"

    def turn(self, context: TurnContext) -> None:
        """Show the table while the player decides on a hand."""
        self.clear()
        if context.dealer_upcard is not None:
            self.write(f"Dealer: {self.card(context.dealer_upcard)} ??")
        for i, hand in enumerate(context.hands):
            marker = ">" if i == context.hand_index else " "
            self.write(f"{marker} Hand {i + 1}: {self.hand(hand)}")
        if context.spare_hands:
            self.write(f"Spare hands for doubling or splitting: {context.spare_hands}")
        self.write()

    def round_result(self, result: RoundResult) -> None:
        """Show the settled round."""
        self.clear()
        dealer_cards = self.cards(result.dealer_cards)
        if result.dealer_blackjack:
            self.write(f"Dealer: {dealer_cards} ; ({self.tag('blackjack')})")
            self.write("Dealer got blackjack. Only player blackjacks push.")
        elif result.dealer_busted:
            self.write(f"Dealer: {dealer_cards} ; ({self.tag('bust')})")
            self.write("Dealer busted. All non-busted hands win.")
        else:
            self.write(f"Dealer: {dealer_cards} ; ({result.dealer_value})")
            wins = len(result.winning_hands)
            if wins:
                self.write(f"Dealer scored {result.dealer_value}, you won on {wins} hand(s).")
            else:
                self.write(f"Dealer scored {result.dealer_value}, you lost on all hands.")

        self.write()
        for hand in result.hands:
            kind, label = OUTCOME_TAGS[hand.outcome]
            value = hand.value if hand.value else "-"
            self.write(
                f"Hand {hand.index + 1}: {self.cards(hand.cards)} ; ({value}) {self.tag(kind, label)}"
            )
