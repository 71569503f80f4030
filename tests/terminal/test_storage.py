"""Tests for save file persistence."""

import json

import pytest

from core.bank import Bank, TransactionType
from core.rules import HISTORY_LIMIT, GameSettings
from core.session import Session
from terminal.schemas import SaveSnapshot
from terminal.storage import SaveFile, StorageError, snapshot_from_session


@pytest.fixture
def save_file(tmp_path):
    return SaveFile(str(tmp_path / "save.json"))


@pytest.fixture
def played_session():
    """A session with settings and a few ledger entries."""
    bank = Bank()
    bank.place_bet(100)
    bank.buy(2)
    bank.win(1.5)
    bank.reset_balance()
    return Session(bank=bank, settings=GameSettings(deck_count=4, hand_count=2))


class TestSaveFile:
    """Tests for reading and writing the save file."""

    def test_missing_file_is_fresh_session(self, save_file):
        assert not save_file.exists()
        session = save_file.load_session()

        assert session.settings is None
        assert session.bank.balance == 1000
        assert session.bank.cur_bet == 0
        assert len(session.bank.history.recent_transactions) == 0

    def test_session_survives_save_and_load(self, save_file, played_session):
        save_file.save_session(played_session)
        loaded = save_file.load_session()

        assert loaded.settings == played_session.settings
        assert loaded.bank.balance == played_session.bank.balance
        assert loaded.bank.cur_bet == 100
        assert loaded.bank.resets == 1
        assert loaded.bank.history.total_spent == 200
        assert loaded.bank.history.total_earned == 150
        assert loaded.bank.history.hands_bought == 2
        assert list(loaded.bank.history.recent_transactions) == list(
            played_session.bank.history.recent_transactions
        )

    def test_loaded_history_keeps_cap(self, save_file, played_session):
        save_file.save_session(played_session)
        history = save_file.load_session().bank.history

        assert history.recent_transactions.maxlen == HISTORY_LIMIT

    def test_file_is_readable_json(self, save_file, played_session):
        save_file.save_session(played_session)
        with open(save_file.path, encoding="utf-8") as f:
            data = json.load(f)

        assert data["settings"] == {"deck_count": 4, "hand_count": 2}
        assert data["bank"]["history"]["recent_transactions"][0] == {
            "amount": 200,
            "type": "spend",
            "balance_after": 800,
        }

    def test_session_without_settings(self, save_file):
        save_file.save_session(Session())
        assert save_file.load_session().settings is None

    def test_creates_parent_directory(self, tmp_path):
        save_file = SaveFile(str(tmp_path / "nested" / "dir" / "save.json"))
        save_file.save_session(Session())
        assert save_file.exists()

    def test_corrupt_json(self, save_file):
        with open(save_file.path, "w", encoding="utf-8") as f:
            f.write("{not json")

        with pytest.raises(StorageError):
            save_file.load()

    def test_out_of_range_settings(self, save_file):
        with open(save_file.path, "w", encoding="utf-8") as f:
            json.dump({"settings": {"deck_count": 17, "hand_count": 1}}, f)

        with pytest.raises(StorageError):
            save_file.load()

    def test_too_many_transactions(self, save_file):
        entry = {"amount": 50, "type": "spend", "balance_after": 950}
        with open(save_file.path, "w", encoding="utf-8") as f:
            json.dump(
                {"bank": {"history": {"recent_transactions": [entry] * (HISTORY_LIMIT + 1)}}},
                f,
            )

        with pytest.raises(StorageError):
            save_file.load()

    def test_unknown_transaction_type(self, save_file):
        entry = {"amount": 50, "type": "loan", "balance_after": 950}
        with open(save_file.path, "w", encoding="utf-8") as f:
            json.dump({"bank": {"history": {"recent_transactions": [entry]}}}, f)

        with pytest.raises(StorageError):
            save_file.load()

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(StorageError):
            SaveFile(str(tmp_path)).save(SaveSnapshot())


class TestSnapshot:
    """Tests for converting sessions to snapshots."""

    def test_snapshot_reads_deque_history(self, played_session):
        snapshot = snapshot_from_session(played_session)

        types = [t.type for t in snapshot.bank.history.recent_transactions]
        assert types == [TransactionType.SPEND, TransactionType.EARN, TransactionType.RESET]
        assert snapshot.settings.deck_count == 4

    def test_full_history_snapshots(self):
        bank = Bank()
        bank.place_bet(50)
        for _ in range(HISTORY_LIMIT + 10):
            bank.win(1.0)

        snapshot = snapshot_from_session(Session(bank=bank))
        assert len(snapshot.bank.history.recent_transactions) == HISTORY_LIMIT
