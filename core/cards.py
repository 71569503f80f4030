"""Cards, piles, and the multi-deck draw/discard pair."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator

from core.errors import DeckExhaustedError

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52


class Suit(Enum):
    """Card suits, in deck construction order."""

    SPADES = auto()
    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }
        return symbols[self]

    @classmethod
    def from_index(cls, index: int) -> "Suit":
        """Return the suit for a cyclic index (0 = spades)."""
        return list(cls)[index % 4]


class Face(Enum):
    """Picture cards and the ace."""

    ACE = "A"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


class Rank(Enum):
    """Card ranks, numbered the way a fresh deck is built (ace low)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        face = self.face
        return face.value if face is not None else str(self.value)

    @property
    def face(self) -> Face | None:
        """Return the face kind, or None for a number card."""
        return _FACES.get(self)


_FACES = {
    Rank.ACE: Face.ACE,
    Rank.JACK: Face.JACK,
    Rank.QUEEN: Face.QUEEN,
    Rank.KING: Face.KING,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.suit}{self.rank}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def face(self) -> Face | None:
        return self.rank.face

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank is Rank.ACE

    @property
    def is_face(self) -> bool:
        """Check if this card is a Jack, Queen or King."""
        return self.face is not None and not self.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like 'AS', '10h' or 'K♥'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {str(rank): rank for rank in Rank}
        rank_map["T"] = Rank.TEN

        suit_map = {
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


class Pile:
    """An ordered stack of cards. The top of the pile is the end of the list."""

    def __init__(self, cards: Iterable[Card] | None = None) -> None:
        self._cards: list[Card] = list(cards) if cards is not None else []

    @classmethod
    def new_full(cls, decks: int) -> "Pile":
        """Build an unshuffled pile holding ``decks`` standard decks."""
        cards = []
        for index in range(CARDS_PER_DECK * decks):
            suit = Suit.from_index(index // 13)
            rank = Rank((index % 13) + 1)
            cards.append(Card(rank, suit))
        return cls(cards)

    def draw(self) -> Card | None:
        """Pop the top card, or return None if the pile is empty."""
        if not self._cards:
            return None
        return self._cards.pop()

    def place(self, card: Card) -> None:
        """Put a card on top of the pile."""
        self._cards.append(card)

    def extend(self, cards: Iterable[Card]) -> None:
        self._cards.extend(cards)

    def shuffle(self, rng: Random) -> None:
        rng.shuffle(self._cards)

    def clear(self) -> list[Card]:
        """Remove and return every card in the pile."""
        cards, self._cards = self._cards, []
        return cards

    @property
    def count(self) -> int:
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)


class Deck:
    """A draw pile and a discard pile built from ``size`` standard decks."""

    def __init__(self, size: int = 1, rng: Random | None = None) -> None:
        """
        Initialize a shuffled deck.

        Args:
            size: Number of 52-card decks combined into the draw pile
            rng: Random number generator for shuffling
        """
        if size < 1:
            raise ValueError("Deck must have at least 1 deck")

        self._size = size
        self._rng = rng or Random()
        self.draw_pile = Pile.new_full(size)
        self.discard_pile = Pile()
        self.reshuffles = 0
        self.draw_pile.shuffle(self._rng)

    def draw(self) -> Card:
        """
        Draw the top card, recycling the discard pile once if the draw pile is empty.

        Raises:
            DeckExhaustedError: if no card is left after reshuffling
        """
        card = self.draw_pile.draw()
        if card is None:
            self.reshuffle()
            card = self.draw_pile.draw()
        if card is None:
            raise DeckExhaustedError(
                f"No cards left to draw from a {self._size}-deck pile"
            )
        return card

    def reshuffle(self) -> None:
        """Move the discards back onto the draw pile and shuffle it."""
        recycled = self.discard_pile.clear()
        self.draw_pile.extend(recycled)
        self.draw_pile.shuffle(self._rng)
        self.reshuffles += 1
        logger.info(
            "Reshuffled %d discarded cards into the draw pile (%d total)",
            len(recycled),
            self.draw_pile.count,
        )

    def discard(self, cards: Iterable[Card]) -> None:
        """Place cards on the discard pile."""
        self.discard_pile.extend(cards)

    @property
    def size(self) -> int:
        """Return the number of decks combined into this one."""
        return self._size

    @property
    def total_cards(self) -> int:
        """Return the number of cards the deck owns, wherever they are."""
        return self._size * CARDS_PER_DECK

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards left in the draw pile."""
        return self.draw_pile.count

    def __len__(self) -> int:
        return self.draw_pile.count
