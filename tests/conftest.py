"""
Pytest fixtures for tests.

Performance optimization: Uses a session-scoped schema template to avoid
running the migrations for every test. Migrations run once and each test
copies the resulting database file.

This module provides centralized constants and fixtures to reduce duplication
across the test suite. Import TEST_GROUP_ID from here instead of defining it locally.
"""

import shutil
import time

import pytest

from database import Database
from domain.models.bet import WagerType
from repositories.activity_repository import ActivityRepository
from repositories.bet_repository import BetRepository
from repositories.ledger_repository import LedgerRepository
from services.activity_service import ActivityFeedService
from services.bet_service import BetService
from services.ledger_service import LedgerService
from services.notification_service import NotificationService
from services.pick_service import PickService
from services.settlement_service import SettlementService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

TEST_GROUP_ID = 12345
"""Standard group ID for single-group tests. Import and use this constant."""

TEST_GROUP_ID_SECONDARY = 67890
"""Secondary group ID for multi-group isolation tests."""

CREATOR_ID = 1000
"""User who creates (and judges) bets in tests."""

START_TIME = 1_700_000_000
"""Frozen wall-clock time used by the clock fixture."""


class Clock:
    """Controllable replacement for time.time()."""

    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> float:
        return float(self.now)

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """
    Create a schema template database once per test session.

    All migrations run ONCE here. Tests copy from this template
    instead of running schema initialization each time.
    """
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    Database(template_path)
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    path = str(tmp_path / "temp.db")
    yield path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """
    Create a temporary database with initialized schema for repository tests.

    The schema template is created once per session and reused.
    """
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


@pytest.fixture
def clock(monkeypatch):
    """Freeze time.time() at START_TIME; call clock.advance(s) to move it."""
    frozen = Clock(START_TIME)
    monkeypatch.setattr(time, "time", frozen)
    return frozen


# =============================================================================
# REPOSITORIES
# =============================================================================


@pytest.fixture
def bet_repository(repo_db_path):
    """Create a bet repository with temp database."""
    return BetRepository(repo_db_path)


@pytest.fixture
def ledger_repository(repo_db_path):
    """Create a ledger repository with temp database."""
    return LedgerRepository(repo_db_path)


@pytest.fixture
def activity_repository(repo_db_path):
    """Create an activity repository with temp database."""
    return ActivityRepository(repo_db_path)


# =============================================================================
# SERVICES
# =============================================================================


@pytest.fixture
def notification_service(activity_repository):
    return NotificationService(activity_repository)


@pytest.fixture
def activity_service(activity_repository):
    return ActivityFeedService(activity_repository)


@pytest.fixture
def bet_service(bet_repository, notification_service, activity_service):
    return BetService(
        bet_repository,
        notification_service=notification_service,
        activity_service=activity_service,
    )


@pytest.fixture
def pick_service(bet_repository):
    return PickService(bet_repository)


@pytest.fixture
def settlement_service(bet_repository, notification_service, activity_service):
    return SettlementService(
        bet_repository,
        notification_service=notification_service,
        activity_service=activity_service,
        retry_delay_seconds=0,
    )


@pytest.fixture
def ledger_service(ledger_repository):
    return LedgerService(ledger_repository)


# =============================================================================
# HELPERS
# =============================================================================


@pytest.fixture
def make_group_bet(bet_service, pick_service, clock):
    """
    Factory: create a GROUP bet, submit picks and optionally close it.

    Usage:
        bet = make_group_bet(WagerType.YES_NO, picks={1: "YES", 2: "NO"})
    """

    def _make(
        wager_type: WagerType,
        picks: dict | None = None,
        wager_amount: int = 10,
        line=None,
        group_id: int = TEST_GROUP_ID,
        close: bool = True,
        title: str = "Test bet",
    ):
        bet = bet_service.create_bet(
            group_id=group_id,
            creator_id=CREATOR_ID,
            title=title,
            wager_type=wager_type,
            wager_amount=wager_amount,
            closes_at=clock.now + 3600,
            line=line,
        )
        for user_id, value in (picks or {}).items():
            pick_service.submit_pick(bet.bet_id, user_id, value)
        if close:
            clock.advance(3600)
        return bet_service.get_bet(bet.bet_id)

    return _make
