"""Pydantic schemas for the save file."""

from pydantic import BaseModel, ConfigDict, Field

from core.bank import TransactionType
from core.rules import HISTORY_LIMIT, MAX_DECKS, MAX_HANDS, STARTING_BALANCE


class SettingsSnapshot(BaseModel):
    """Last table settings."""

    model_config = ConfigDict(from_attributes=True)

    deck_count: int = Field(..., ge=1, le=MAX_DECKS)
    hand_count: int = Field(..., ge=1, le=MAX_HANDS)


class TransactionSnapshot(BaseModel):
    """One ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    amount: int = Field(..., ge=0)
    type: TransactionType
    balance_after: int = Field(..., ge=0)


class HistorySnapshot(BaseModel):
    """Ledger counters and recent transactions, oldest first."""

    model_config = ConfigDict(from_attributes=True)

    resets: int = Field(0, ge=0)
    total_spent: int = Field(0, ge=0)
    total_earned: int = Field(0, ge=0)
    hands_bought: int = Field(0, ge=0)
    recent_transactions: list[TransactionSnapshot] = Field(
        default_factory=list, max_length=HISTORY_LIMIT
    )


class BankSnapshot(BaseModel):
    """Balance, bet per hand and history."""

    model_config = ConfigDict(from_attributes=True)

    balance: int = Field(STARTING_BALANCE, ge=0)
    cur_bet: int = Field(0, ge=0)
    history: HistorySnapshot = Field(default_factory=HistorySnapshot)


class SaveSnapshot(BaseModel):
    """Everything persisted between runs."""

    settings: SettingsSnapshot | None = None
    bank: BankSnapshot = Field(default_factory=BankSnapshot)
