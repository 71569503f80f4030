"""Pytest fixtures for blackjack tests."""

import pytest
from random import Random

from core.bank import Bank
from core.cards import Card, Deck, Rank, Suit
from core.hand import Hand
from core.rules import GameSettings
from core.game import BlackjackGame


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled single deck."""
    return Deck(1, rng=rng)


@pytest.fixture
def make_hand():
    """Build a hand from card strings like 'AS', '10H'."""

    def _make(*cards: str, doubled: bool = False) -> Hand:
        return Hand(cards=[Card.from_string(c) for c in cards], doubled=doubled)

    return _make


@pytest.fixture
def rig():
    """
    Move the given cards to the top of a deck's draw pile so they come out in order.

    The cards are taken from the deck itself, so the card total is unchanged.
    """

    def _rig(deck: Deck, *cards: str) -> None:
        wanted = [Card.from_string(c) for c in cards]
        remaining = deck.draw_pile.clear()
        for card in wanted:
            remaining.remove(card)
        deck.draw_pile.extend(remaining + list(reversed(wanted)))

    return _rig


@pytest.fixture
def script():
    """A decision source that replays a fixed list of actions and records each turn."""

    def _script(*actions):
        pending = list(actions)
        seen = []

        def decide(context):
            seen.append(context)
            return pending.pop(0)

        decide.seen = seen
        decide.pending = pending
        return decide

    return _script


@pytest.fixture
def no_decisions():
    """A decision source for rounds that must finish without player input."""

    def decide(context):
        raise AssertionError(f"Unexpected decision on hand {context.hand_index}")

    return decide


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)])


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand(cards=[Card(Rank.EIGHT, Suit.SPADES), Card(Rank.EIGHT, Suit.HEARTS)])


@pytest.fixture
def bust_hand():
    """King, Queen, 5: every total is over 21."""
    return Hand(
        cards=[
            Card(Rank.KING, Suit.SPADES),
            Card(Rank.QUEEN, Suit.HEARTS),
            Card(Rank.FIVE, Suit.CLUBS),
        ]
    )


@pytest.fixture
def game(rng):
    """A one-deck, one-hand game."""
    return BlackjackGame(GameSettings(deck_count=1, hand_count=1), rng=rng)


@pytest.fixture
def two_hand_game(rng):
    """A one-deck game with two player hands."""
    return BlackjackGame(GameSettings(deck_count=1, hand_count=2), rng=rng)


@pytest.fixture
def bank():
    """A bank with the starting balance and a $50 bet."""
    b = Bank()
    b.place_bet(50)
    return b
