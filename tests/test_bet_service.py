"""
Tests for bet creation, challenge lifecycle, early close and reads.
"""

from decimal import Decimal

import pytest

from domain.models.bet import BetMode, BetStatus, ChallengeStatus, OddsRatio, WagerType
from services.bet_service import VOID_CHALLENGE_DECLINED, VOID_CHALLENGE_EXPIRED
from services.errors import (
    AlreadySettled,
    BetClosed,
    BetNotFound,
    ChallengeNotPending,
    InvalidValue,
    Unauthorized,
    ValidationError,
)
from tests.conftest import CREATOR_ID, TEST_GROUP_ID, TEST_GROUP_ID_SECONDARY


class TestCreateBet:
    def test_creates_open_group_bet(self, bet_service, clock):
        bet = bet_service.create_bet(
            group_id=TEST_GROUP_ID,
            creator_id=CREATOR_ID,
            title="  Points scored tonight  ",
            wager_type=WagerType.OVER_UNDER,
            wager_amount=250,
            closes_at=clock.now + 600,
            line=50.5,
            description="Home team only",
        )

        assert bet.bet_id > 0
        assert bet.mode == BetMode.GROUP
        assert bet.status == BetStatus.OPEN
        assert bet.title == "Points scored tonight"
        assert bet.line == Decimal("50.5")
        assert bet.created_at == clock.now
        assert bet.picks == {}
        assert bet.participants == set()
        assert bet.description == "Home team only"

    def test_validation_error_creates_nothing(self, bet_service, clock):
        with pytest.raises(ValidationError, match="Title"):
            bet_service.create_bet(TEST_GROUP_ID, CREATOR_ID, "ab", WagerType.YES_NO, 100, clock.now + 60)
        assert bet_service.get_group_bets(TEST_GROUP_ID) == []

    def test_over_under_requires_line(self, bet_service, clock):
        with pytest.raises(ValidationError, match="line"):
            bet_service.create_bet(TEST_GROUP_ID, CREATOR_ID, "Goals", WagerType.OVER_UNDER, 100, clock.now + 60)

    def test_group_bet_requires_group(self, bet_service, clock):
        with pytest.raises(ValidationError, match="group"):
            bet_service.create_bet(None, CREATOR_ID, "Rain?", WagerType.YES_NO, 100, clock.now + 60)

    def test_records_activity(self, bet_service, activity_repository, clock):
        bet = bet_service.create_bet(TEST_GROUP_ID, CREATOR_ID, "Rain?", WagerType.YES_NO, 100, clock.now + 60)

        feed = activity_repository.get_group_activities(TEST_GROUP_ID)
        assert len(feed) == 1
        assert feed[0]["type"] == "bet_created"
        assert feed[0]["bet_id"] == bet.bet_id
        assert feed[0]["user_id"] == CREATOR_ID

    def test_activity_failure_does_not_fail_creation(self, bet_service, monkeypatch, clock):
        def boom(bet):
            raise RuntimeError("feed down")

        monkeypatch.setattr(bet_service.activity_service, "record_bet_created", boom)

        bet = bet_service.create_bet(TEST_GROUP_ID, CREATOR_ID, "Rain?", WagerType.YES_NO, 100, clock.now + 60)
        assert bet_service.get_bet(bet.bet_id).status == BetStatus.OPEN


class TestCreateChallenge:
    def test_creates_pending_challenge(self, bet_service, activity_repository, clock):
        bet = bet_service.create_challenge(
            challenger_id=1,
            challengee_id=2,
            title="Closest to the final score",
            wager_type=WagerType.CLOSEST_GUESS,
            wager_amount=1000,
            closes_at=clock.now + 3600,
            challenger_pick=48,
            odds=OddsRatio(2, 1),
        )

        assert bet.mode == BetMode.HEAD_TO_HEAD
        assert bet.challenge_status == ChallengeStatus.PENDING
        assert bet.creator_id == 1
        assert bet.picks == {1: Decimal(48)}
        assert bet.odds == OddsRatio(2, 1)
        assert bet.group_id is None

        notifications = activity_repository.get_notifications(2)
        assert len(notifications) == 1
        assert notifications[0]["title"] == "New Challenge!"
        assert notifications[0]["from_user_id"] == 1
        assert notifications[0]["amount"] == 1000

    def test_cannot_challenge_self(self, bet_service, clock):
        with pytest.raises(ValidationError):
            bet_service.create_challenge(1, 1, "Self duel", WagerType.YES_NO, 100, clock.now + 60, "YES")

    def test_challenger_pick_is_validated(self, bet_service, clock):
        with pytest.raises(InvalidValue):
            bet_service.create_challenge(1, 2, "Duel", WagerType.OVER_UNDER, 100, clock.now + 60, "YES", line=3)

    def test_pending_challenge_is_listed_for_challengee(self, bet_service, clock):
        bet = bet_service.create_challenge(1, 2, "Duel", WagerType.YES_NO, 100, clock.now + 60, "YES")
        assert [b.bet_id for b in bet_service.get_user_open_bets(2)] == [bet.bet_id]


class TestChallengeLifecycle:
    @pytest.fixture
    def challenge(self, bet_service, clock):
        return bet_service.create_challenge(1, 2, "Duel", WagerType.YES_NO, 100, clock.now + 3600, "YES")

    def test_decline_voids_bet(self, bet_service, ledger_repository, challenge):
        bet = bet_service.decline_challenge(challenge.bet_id, 2)

        assert bet.status == BetStatus.VOID
        assert bet.void_reason == VOID_CHALLENGE_DECLINED
        assert bet.challenge_status == ChallengeStatus.DECLINED
        assert ledger_repository.get_user_entries(1) == []
        assert ledger_repository.get_user_entries(2) == []

    def test_only_challengee_can_decline(self, bet_service, challenge):
        with pytest.raises(Unauthorized):
            bet_service.decline_challenge(challenge.bet_id, 1)

    def test_cannot_decline_accepted_challenge(self, bet_service, pick_service, challenge):
        pick_service.submit_pick(challenge.bet_id, 2, "NO")
        with pytest.raises(ChallengeNotPending):
            bet_service.decline_challenge(challenge.bet_id, 2)

    def test_expire_stale_challenges(self, bet_service, pick_service, clock, challenge):
        accepted = bet_service.create_challenge(3, 4, "Other duel", WagerType.YES_NO, 100, clock.now + 3600, "NO")
        pick_service.submit_pick(accepted.bet_id, 4, "YES")
        later = bet_service.create_challenge(5, 6, "Later duel", WagerType.YES_NO, 100, clock.now + 7200, "NO")

        clock.advance(3600)
        expired = bet_service.expire_stale_challenges()

        assert expired == [challenge.bet_id]
        bet = bet_service.get_bet(challenge.bet_id)
        assert bet.status == BetStatus.VOID
        assert bet.void_reason == VOID_CHALLENGE_EXPIRED
        assert bet_service.get_bet(accepted.bet_id).status == BetStatus.OPEN
        assert bet_service.get_bet(later.bet_id).status == BetStatus.OPEN

        # Idempotent
        assert bet_service.expire_stale_challenges() == []


class TestCloseBetting:
    def test_creator_closes_early(self, bet_service, pick_service, make_group_bet, clock):
        bet = make_group_bet(WagerType.YES_NO, picks={1: "YES"}, close=False)

        closed = bet_service.close_betting(bet.bet_id, CREATOR_ID)

        assert closed.closes_at == clock.now
        assert closed.is_closed(clock.now)
        with pytest.raises(BetClosed):
            pick_service.submit_pick(bet.bet_id, 2, "NO")

    def test_non_creator_cannot_close(self, bet_service, make_group_bet):
        bet = make_group_bet(WagerType.YES_NO, close=False)
        with pytest.raises(Unauthorized):
            bet_service.close_betting(bet.bet_id, 1)

    def test_already_closed_is_noop(self, bet_service, make_group_bet):
        bet = make_group_bet(WagerType.YES_NO, close=True)
        assert bet_service.close_betting(bet.bet_id, CREATOR_ID).closes_at == bet.closes_at

    def test_settled_bet(self, bet_service, settlement_service, make_group_bet):
        bet = make_group_bet(WagerType.YES_NO, picks={1: "YES"})
        settlement_service.judge(bet.bet_id, "YES", CREATOR_ID)
        with pytest.raises(AlreadySettled):
            bet_service.close_betting(bet.bet_id, CREATOR_ID)


class TestReads:
    def test_get_bet_missing(self, bet_service):
        with pytest.raises(BetNotFound):
            bet_service.get_bet(12)

    def test_group_bets_are_isolated_and_filterable(self, bet_service, settlement_service, make_group_bet):
        first = make_group_bet(WagerType.YES_NO, picks={1: "YES"})
        settlement_service.judge(first.bet_id, "YES", CREATOR_ID)
        second = make_group_bet(WagerType.YES_NO, close=False)
        make_group_bet(WagerType.YES_NO, group_id=TEST_GROUP_ID_SECONDARY, close=False)

        assert {b.bet_id for b in bet_service.get_group_bets(TEST_GROUP_ID)} == {first.bet_id, second.bet_id}
        assert [b.bet_id for b in bet_service.get_group_bets(TEST_GROUP_ID, BetStatus.OPEN)] == [second.bet_id]
        assert [b.bet_id for b in bet_service.get_group_bets(TEST_GROUP_ID, "JUDGED")] == [first.bet_id]

    def test_live_percentages(self, bet_service, make_group_bet):
        bet = make_group_bet(WagerType.YES_NO, picks={1: "YES", 2: "YES", 3: "NO"}, close=False)
        assert bet_service.get_live_percentages(bet.bet_id) == {"NO": 33.3, "YES": 66.7}

    def test_live_percentages_without_picks(self, bet_service, make_group_bet):
        bet = make_group_bet(WagerType.OVER_UNDER, line="2.5", close=False)
        assert bet_service.get_live_percentages(bet.bet_id) == {"OVER": 0.0, "UNDER": 0.0}

    def test_live_percentages_closest_guess(self, bet_service, make_group_bet):
        bet = make_group_bet(WagerType.CLOSEST_GUESS, picks={1: 3}, close=False)
        assert bet_service.get_live_percentages(bet.bet_id) == {}
