"""Core blackjack engine - 100% UI-agnostic."""

from core.bank import Bank, BankHistory, Transaction, TransactionType
from core.cards import Card, Deck, Face, Pile, Rank, Suit
from core.hand import Hand, Outcome
from core.rules import GameSettings

__all__ = [
    "Bank",
    "BankHistory",
    "Card",
    "Deck",
    "Face",
    "GameSettings",
    "Hand",
    "Outcome",
    "Pile",
    "Rank",
    "Suit",
    "Transaction",
    "TransactionType",
]
