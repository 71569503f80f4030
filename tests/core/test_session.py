"""Tests for sessions: buying hands around rounds."""

import pytest
from random import Random

from core.bank import Bank, TransactionType
from core.errors import InsufficientFundsError, NotConfiguredError
from core.game import Action
from core.rules import GameSettings
from core.session import Session


class TestSession:
    """Tests for state kept between rounds."""

    def test_new_session_cannot_replay(self):
        session = Session()
        assert session.settings is None
        assert not session.can_replay

    def test_resume_without_settings(self):
        with pytest.raises(NotConfiguredError):
            Session().resume()

    def test_can_replay_after_configure(self):
        session = Session()
        session.configure(GameSettings(deck_count=2, hand_count=3), 100)

        assert session.can_replay
        assert session.bank.cur_bet == 100

    def test_cannot_replay_when_unaffordable(self):
        session = Session(bank=Bank(balance=150, cur_bet=100), settings=GameSettings(hand_count=2))
        assert not session.can_replay

    def test_configure_rejects_small_bet(self):
        with pytest.raises(ValueError):
            Session().configure(GameSettings(), 10)

    def test_ensure_balance(self):
        session = Session(bank=Bank(balance=49))
        assert session.ensure_balance()
        assert session.bank.balance == 1000
        assert session.bank.resets == 1
        assert not session.ensure_balance()


class TestConfiguredSession:
    """Tests for playing rounds against the bank."""

    def test_double_round_money(self, rig, script):
        session = Session()
        table = session.configure(GameSettings(), 100, rng=Random(1))
        rig(table.game.deck, "5H", "10S", "6C", "8D", "9H")

        summary = table.play_round(script(Action.DOUBLE))

        assert summary.spent == 200
        assert summary.earned == 400
        assert summary.balance == 1200
        kinds = [t.type for t in session.bank.history.recent_transactions]
        assert kinds == [TransactionType.SPEND, TransactionType.SPEND, TransactionType.EARN]
        assert session.bank.history.hands_bought == 2

    def test_losing_round_records_no_earnings(self, rig, script):
        session = Session()
        table = session.configure(GameSettings(), 50, rng=Random(1))
        rig(table.game.deck, "10H", "10S", "6C", "9D")

        summary = table.play_round(script(Action.STAND))

        assert summary.earned == 0
        assert summary.balance == 950
        assert len(session.bank.history.recent_transactions) == 1

    def test_spare_hands_follow_balance(self, rig, script):
        session = Session(bank=Bank(balance=150))
        table = session.configure(GameSettings(hand_count=2), 50, rng=Random(1))
        rig(table.game.deck, "8H", "8S", "10C", "8C", "8D", "7D")

        decide = script(Action.STAND, Action.STAND)
        table.play_round(decide)

        # 150 - 2 * 50 leaves one spare hand, enough to split either pair
        assert decide.seen[0].spare_hands == 1
        assert Action.SPLIT in decide.seen[0].actions

    def test_spare_hands_zero_when_balance_spent(self, rig, script):
        session = Session(bank=Bank(balance=100))
        table = session.configure(GameSettings(hand_count=2), 50, rng=Random(1))
        rig(table.game.deck, "8H", "8S", "10C", "8C", "8D", "7D")

        decide = script(Action.STAND, Action.STAND)
        table.play_round(decide)

        assert decide.seen[0].actions == (Action.HIT, Action.STAND)

    def test_unaffordable_round(self, no_decisions):
        session = Session(bank=Bank(balance=1000))
        table = session.configure(GameSettings(hand_count=3), 300)
        assert table.can_afford_round

        session.bank.balance = 500
        assert not table.can_afford_round
        with pytest.raises(InsufficientFundsError):
            table.play_round(no_decisions)
        assert session.bank.balance == 500

    def test_update_settings_changes_bet(self):
        session = Session()
        table = session.configure(GameSettings(), 50)
        table.update_settings(GameSettings(deck_count=3, hand_count=2), bet=75)

        assert session.settings == GameSettings(deck_count=3, hand_count=2)
        assert session.bank.cur_bet == 75
        assert table.round_cost == 150
        assert table.game.deck.total_cards == 156


class TestGameSettings:
    """Tests for table settings validation."""

    def test_limits(self):
        GameSettings(deck_count=16, hand_count=7)
        for deck_count, hand_count in [(0, 1), (17, 1), (1, 0), (1, 8)]:
            with pytest.raises(ValueError):
                GameSettings(deck_count=deck_count, hand_count=hand_count)

    def test_round_cost(self):
        assert GameSettings(hand_count=3).round_cost(75) == 225
