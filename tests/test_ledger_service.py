"""
Tests for ledger reporting.
"""

import pytest

from domain.models.bet import WagerType
from domain.models.ledger import LedgerEntry
from tests.conftest import CREATOR_ID, TEST_GROUP_ID, TEST_GROUP_ID_SECONDARY


def test_missing_entry_is_zeroed(ledger_service):
    entry = ledger_service.get_entry(TEST_GROUP_ID, 42)
    assert entry == LedgerEntry(group_id=TEST_GROUP_ID, user_id=42)
    assert entry.win_rate == 0.0


def test_leaderboard_orders_by_balance_then_wins(ledger_service, settlement_service, make_group_bet):
    # User 1 wins once, user 2 wins once, user 3 loses both
    first = make_group_bet(WagerType.YES_NO, picks={1: "YES", 2: "NO", 3: "NO"}, wager_amount=10)
    settlement_service.judge(first.bet_id, "YES", CREATOR_ID)
    second = make_group_bet(WagerType.YES_NO, picks={1: "NO", 2: "YES", 3: "NO"}, wager_amount=10)
    settlement_service.judge(second.bet_id, "YES", CREATOR_ID)

    board = ledger_service.get_leaderboard(TEST_GROUP_ID)

    assert [row["user_id"] for row in board] == [1, 2, 3]
    assert [row["rank"] for row in board] == [1, 2, 3]
    assert board[0]["balance"] == 20
    assert board[0]["win_rate"] == 0.5
    assert board[2] == {
        "rank": 3,
        "user_id": 3,
        "balance": -20,
        "wins": 0,
        "losses": 2,
        "total_bets": 2,
        "win_rate": 0.0,
    }


def test_leaderboard_limit_and_isolation(ledger_service, settlement_service, make_group_bet):
    bet = make_group_bet(WagerType.YES_NO, picks={1: "YES", 2: "NO", 3: "NO"})
    settlement_service.judge(bet.bet_id, "YES", CREATOR_ID)

    assert len(ledger_service.get_leaderboard(TEST_GROUP_ID, limit=2)) == 2
    assert ledger_service.get_leaderboard(TEST_GROUP_ID_SECONDARY) == []


def test_leaderboard_rejects_non_positive_limit(ledger_service):
    with pytest.raises(ValueError):
        ledger_service.get_leaderboard(TEST_GROUP_ID, limit=0)


def test_user_ledgers_span_groups(ledger_service, settlement_service, make_group_bet):
    for group_id in (TEST_GROUP_ID, TEST_GROUP_ID_SECONDARY):
        bet = make_group_bet(WagerType.YES_NO, picks={1: "YES", 2: "NO"}, group_id=group_id)
        settlement_service.judge(bet.bet_id, "YES", CREATOR_ID)

    entries = ledger_service.get_user_ledgers(1)
    assert [entry.group_id for entry in entries] == [TEST_GROUP_ID, TEST_GROUP_ID_SECONDARY]
    assert all(entry.balance == 20 for entry in entries)
