"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from core.cards import Card, Deck
from core.rules import (
    BLACKJACK,
    BLACKJACK_PAYOUT,
    DEALER_STANDS_ON,
    DOUBLE_PAYOUT,
    PUSH_PAYOUT,
    WIN_PAYOUT,
)


@dataclass
class Hand:
    """A blackjack hand scored under every choice of ace values."""

    cards: list[Card] = field(default_factory=list)
    doubled: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def draw_from(self, deck: Deck) -> Card:
        """Draw the next card from ``deck`` into the hand."""
        card = deck.draw()
        self.cards.append(card)
        return card

    def take_card(self) -> Card | None:
        """Remove and return the top card, or None if the hand is empty."""
        if not self.cards:
            return None
        return self.cards.pop()

    def clear(self) -> list[Card]:
        """Empty the hand, returning its cards."""
        cards, self.cards = self.cards, []
        self.doubled = False
        return cards

    @property
    def values(self) -> list[int]:
        """
        Every total the hand can take.

        Each ace counts 1 on every existing branch and opens one new branch
        ten higher than the best so far, so ``k`` aces yield ``k + 1`` totals
        in increasing order. Face cards count 10.
        """
        totals = [0]
        for card in self.cards:
            if card.is_ace:
                totals = [total + 1 for total in totals]
                totals.append(max(totals) + 10)
            elif card.is_face:
                totals = [total + 10 for total in totals]
            else:
                totals = [total + card.rank.value for total in totals]
        return totals

    @property
    def legal_values(self) -> list[int]:
        """Return the totals that do not exceed 21."""
        return [total for total in self.values if total <= BLACKJACK]

    @property
    def true_value(self) -> int:
        """Return the best legal total, or 0 if the hand is busted."""
        return max(self.legal_values, default=0)

    @property
    def is_busted(self) -> bool:
        """Check if every total exceeds 21."""
        return min(self.values) > BLACKJACK

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural (21 with 2 cards)."""
        return len(self.cards) == 2 and self.true_value == BLACKJACK

    @property
    def is_splittable(self) -> bool:
        """Check for two cards of the same rank (a King and a Queen do not split)."""
        return len(self.cards) == 2 and self.cards[0].rank == self.cards[1].rank

    @property
    def is_soft(self) -> bool:
        """Check if the best legal total counts an ace as 11."""
        return self.true_value > min(self.values)

    @property
    def top_card(self) -> Card | None:
        """Return the most recently added card."""
        return self.cards[-1] if self.cards else None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        if self.is_blackjack:
            return f"{cards_str} (BLACKJACK)"
        if self.is_busted:
            return f"{cards_str} (BUST)"
        totals = ", ".join(str(total) for total in self.legal_values)
        return f"{cards_str} ({totals})"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, values={self.values}, doubled={self.doubled})"


class Outcome(Enum):
    """Settled result of a player hand, valued in bet units returned."""

    BLACKJACK = auto()
    DOUBLE_WIN = auto()
    WIN = auto()
    PUSH = auto()
    LOSS = auto()
    BUST = auto()

    @property
    def payout(self) -> float:
        return _PAYOUTS.get(self, 0.0)

    @property
    def is_win(self) -> bool:
        return self in (Outcome.BLACKJACK, Outcome.DOUBLE_WIN, Outcome.WIN)


_PAYOUTS = {
    Outcome.BLACKJACK: BLACKJACK_PAYOUT,
    Outcome.DOUBLE_WIN: DOUBLE_PAYOUT,
    Outcome.WIN: WIN_PAYOUT,
    Outcome.PUSH: PUSH_PAYOUT,
}


def dealer_should_hit(hand: Hand) -> bool:
    """The dealer draws on any legal total below 17 and stops once busted."""
    value = hand.true_value
    return value != 0 and value < DEALER_STANDS_ON


def evaluate_hand(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Settle a player hand against the dealer's finished hand.

    The player wins only by beating the dealer's true value outright, so
    ties lose and a busted hand (true value 0) never wins.
    """
    if player_hand.true_value > dealer_hand.true_value:
        if player_hand.is_blackjack:
            return Outcome.BLACKJACK
        if player_hand.doubled:
            return Outcome.DOUBLE_WIN
        return Outcome.WIN

    if player_hand.is_busted:
        return Outcome.BUST
    return Outcome.LOSS


def evaluate_natural(player_hand: Hand) -> Outcome:
    """Settle a player hand when the dealer was dealt blackjack."""
    if player_hand.is_blackjack:
        return Outcome.PUSH
    return Outcome.LOSS
