"""Save file persistence for the bank and the last table settings."""

import logging
import os

from pydantic import ValidationError

from core.bank import Bank, BankHistory, Transaction
from core.errors import BlackjackError
from core.rules import GameSettings
from core.session import Session
from terminal.schemas import BankSnapshot, SaveSnapshot, SettingsSnapshot

logger = logging.getLogger(__name__)


class StorageError(BlackjackError, OSError):
    """The save file could not be read or written. Play can continue."""


def snapshot_from_session(session: Session) -> SaveSnapshot:
    """Capture the persistent parts of a session."""
    settings = None
    if session.settings is not None:
        settings = SettingsSnapshot.model_validate(session.settings)
    return SaveSnapshot(
        settings=settings,
        bank=BankSnapshot.model_validate(session.bank),
    )


def session_from_snapshot(snapshot: SaveSnapshot) -> Session:
    """Rebuild a session from a validated snapshot."""
    history = snapshot.bank.history
    bank = Bank(
        balance=snapshot.bank.balance,
        cur_bet=snapshot.bank.cur_bet,
        history=BankHistory(
            resets=history.resets,
            total_spent=history.total_spent,
            total_earned=history.total_earned,
            hands_bought=history.hands_bought,
            recent_transactions=[
                Transaction(
                    amount=t.amount,
                    type=t.type,
                    balance_after=t.balance_after,
                )
                for t in history.recent_transactions
            ],
        ),
    )

    settings = None
    if snapshot.settings is not None:
        settings = GameSettings(
            deck_count=snapshot.settings.deck_count,
            hand_count=snapshot.settings.hand_count,
        )
    return Session(bank=bank, settings=settings)


class SaveFile:
    """A single JSON save file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> SaveSnapshot:
        """
        Read the snapshot from disk.

        A missing file yields a fresh snapshot.

        Raises:
            StorageError: if the file cannot be read or does not validate
        """
        if not self.exists():
            logger.info("No save file at %s, starting fresh", self.path)
            return SaveSnapshot()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = f.read()
            return SaveSnapshot.model_validate_json(data)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read save file %s: %s", self.path, e)
            raise StorageError(f"Failed to read save file {self.path}: {e}") from e
        except ValidationError as e:
            logger.warning("Invalid save file %s: %s", self.path, e)
            raise StorageError(
                f"Save file {self.path} is corrupt ({e.error_count()} error(s))"
            ) from e

    def save(self, snapshot: SaveSnapshot) -> None:
        """
        Write the snapshot to disk.

        Raises:
            StorageError: if the file cannot be written
        """
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json(indent=2))
        except OSError as e:
            logger.warning("Could not write save file %s: %s", self.path, e)
            raise StorageError(f"Failed to save to {self.path}: {e}") from e

    def load_session(self) -> Session:
        """Load a session, raising StorageError on a bad file."""
        return session_from_snapshot(self.load())

    def save_session(self, session: Session) -> None:
        self.save(snapshot_from_session(session))
