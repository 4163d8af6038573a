"""
Tests for the pure judging domain service.
"""

from decimal import Decimal

import pytest

from domain.models.bet import Bet, BetMode, BetStatus, ChallengeStatus, WagerType
from domain.services.judging_service import (
    VOID_BOTH_CORRECT,
    VOID_EXACT_TIE,
    VOID_NO_CORRECT_PICKS,
    VOID_NO_ONE_CORRECT,
    VOID_NO_PICKS,
    VOID_ON_THE_LINE,
    JudgingService,
)


def _group_bet(wager_type, picks, line=None):
    return Bet(
        bet_id=1,
        mode=BetMode.GROUP,
        wager_type=wager_type,
        title="Test",
        creator_id=99,
        wager_amount=10,
        created_at=0,
        closes_at=100,
        group_id=1,
        line=Decimal(line) if line is not None else None,
        participants=set(picks),
        picks=dict(picks),
    )


def _h2h_bet(wager_type, challenger_pick, challengee_pick, line=None):
    return Bet(
        bet_id=2,
        mode=BetMode.HEAD_TO_HEAD,
        wager_type=wager_type,
        title="Duel",
        creator_id=1,
        wager_amount=10,
        created_at=0,
        closes_at=100,
        line=Decimal(line) if line is not None else None,
        participants={1, 2},
        picks={1: challenger_pick, 2: challengee_pick},
        challenger_id=1,
        challengee_id=2,
        challenge_status=ChallengeStatus.ACCEPTED,
    )


@pytest.fixture
def judging():
    return JudgingService()


class TestGroupYesNo:
    def test_winners_are_exactly_matching_picks(self, judging):
        bet = _group_bet(WagerType.YES_NO, {1: "YES", 2: "NO", 3: "YES", 4: "NO"})
        result = judging.judge(bet, "YES")
        assert result.status == BetStatus.JUDGED
        assert result.winners == (1, 3)
        assert result.void_reason is None

    def test_no_correct_picks_voids_by_default(self, judging):
        bet = _group_bet(WagerType.YES_NO, {1: "NO", 2: "NO"})
        result = judging.judge(bet, "YES")
        assert result.is_void
        assert result.void_reason == VOID_NO_CORRECT_PICKS
        assert result.winners == ()

    def test_no_correct_picks_judged_when_void_disabled(self):
        judging = JudgingService(void_yes_no_without_winners=False)
        bet = _group_bet(WagerType.YES_NO, {1: "NO", 2: "NO"})
        result = judging.judge(bet, "YES")
        assert result.status == BetStatus.JUDGED
        assert result.winners == ()

    def test_no_picks_is_void(self, judging):
        bet = _group_bet(WagerType.YES_NO, {})
        result = judging.judge(bet, "NO")
        assert result.is_void
        assert result.void_reason == VOID_NO_PICKS


class TestGroupOverUnder:
    def test_outcome_above_line_picks_over(self, judging):
        bet = _group_bet(WagerType.OVER_UNDER, {1: "OVER", 2: "OVER", 3: "UNDER", 4: "UNDER"}, line="50.5")
        result = judging.judge(bet, Decimal("60"))
        assert result.status == BetStatus.JUDGED
        assert result.winners == (1, 2)

    def test_outcome_below_line_picks_under(self, judging):
        bet = _group_bet(WagerType.OVER_UNDER, {1: "OVER", 2: "UNDER"}, line="50.5")
        result = judging.judge(bet, Decimal("12"))
        assert result.winners == (2,)

    @pytest.mark.parametrize(
        "picks",
        [
            {1: "OVER", 2: "UNDER"},
            {1: "OVER"},
            {1: "UNDER", 2: "UNDER"},
        ],
    )
    def test_exactly_on_line_is_push_regardless_of_picks(self, judging, picks):
        bet = _group_bet(WagerType.OVER_UNDER, picks, line="50")
        result = judging.judge(bet, Decimal("50.0"))
        assert result.is_void
        assert result.void_reason == VOID_ON_THE_LINE

    def test_no_winning_side_picks_is_distinct_void(self, judging):
        bet = _group_bet(WagerType.OVER_UNDER, {1: "UNDER", 2: "UNDER"}, line="50.5")
        result = judging.judge(bet, Decimal("51"))
        assert result.is_void
        assert result.void_reason == VOID_NO_CORRECT_PICKS

    def test_winning_side(self):
        assert JudgingService.winning_side(Decimal("1.5"), Decimal("2")) == "OVER"
        assert JudgingService.winning_side(Decimal("1.5"), Decimal("1")) == "UNDER"
        assert JudgingService.winning_side(Decimal("1.5"), Decimal("1.50")) is None


class TestGroupClosestGuess:
    def test_single_closest_wins(self, judging):
        bet = _group_bet(WagerType.CLOSEST_GUESS, {1: Decimal(10), 2: Decimal(20), 3: Decimal(30)})
        result = judging.judge(bet, Decimal(15) - Decimal("0.1"))
        assert result.winners == (1,)

    def test_nearest_of_three_guesses_wins(self, judging):
        bet = _group_bet(WagerType.CLOSEST_GUESS, {1: Decimal(10), 2: Decimal(21), 3: Decimal(30)})
        result = judging.judge(bet, Decimal(15))
        assert result.status == BetStatus.JUDGED
        assert result.winners == (1,)

    def test_ties_keep_every_closest_participant(self, judging):
        bet = _group_bet(WagerType.CLOSEST_GUESS, {1: Decimal(10), 2: Decimal(20), 3: Decimal(30)})
        result = judging.judge(bet, Decimal(15))
        assert result.status == BetStatus.JUDGED
        assert result.winners == (1, 2)

    def test_decimal_distances_are_exact(self, judging):
        bet = _group_bet(WagerType.CLOSEST_GUESS, {1: Decimal("0.1"), 2: Decimal("0.5")})
        result = judging.judge(bet, Decimal("0.3"))
        assert result.winners == (1, 2)


class TestHeadToHead:
    def test_yes_no_one_correct_is_decisive(self, judging):
        result = judging.judge(_h2h_bet(WagerType.YES_NO, "YES", "NO"), "NO")
        assert result.status == BetStatus.JUDGED
        assert result.winner_id == 2
        assert result.loser_id == 1
        assert result.winners == (2,)

    def test_yes_no_neither_correct_is_void(self, judging):
        # Both picked YES, outcome NO
        result = judging.judge(_h2h_bet(WagerType.YES_NO, "YES", "YES"), "NO")
        assert result.is_void
        assert result.void_reason == VOID_NO_ONE_CORRECT

    def test_yes_no_both_correct_is_void(self, judging):
        result = judging.judge(_h2h_bet(WagerType.YES_NO, "YES", "YES"), "YES")
        assert result.is_void
        assert result.void_reason == VOID_BOTH_CORRECT

    def test_over_under_compares_side(self, judging):
        result = judging.judge(_h2h_bet(WagerType.OVER_UNDER, "OVER", "UNDER", line="7.5"), Decimal(9))
        assert result.winner_id == 1
        assert result.loser_id == 2

    def test_over_under_on_line_is_push(self, judging):
        result = judging.judge(_h2h_bet(WagerType.OVER_UNDER, "OVER", "UNDER", line="7"), Decimal(7))
        assert result.is_void
        assert result.void_reason == VOID_ON_THE_LINE

    def test_closest_guess_smaller_distance_wins(self, judging):
        result = judging.judge(_h2h_bet(WagerType.CLOSEST_GUESS, Decimal(48), Decimal(51)), Decimal(50))
        assert result.winner_id == 2
        assert result.loser_id == 1

    def test_closest_guess_exact_tie_is_void(self, judging):
        result = judging.judge(_h2h_bet(WagerType.CLOSEST_GUESS, Decimal(48), Decimal(52)), Decimal(50))
        assert result.is_void
        assert result.void_reason == VOID_EXACT_TIE
        assert result.winner_id is None
