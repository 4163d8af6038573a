"""
Judging domain service.

Turns an authoritative outcome into a winner set or a void for a bet.
"""

from dataclasses import dataclass
from decimal import Decimal

from domain.models.bet import Bet, BetStatus, PickValue, WagerType

VOID_ON_THE_LINE = "on the line"
VOID_NO_CORRECT_PICKS = "no correct picks"
VOID_NO_PICKS = "no picks"
VOID_NO_ONE_CORRECT = "no one picked correctly"
VOID_BOTH_CORRECT = "both picked correctly"
VOID_EXACT_TIE = "exact tie"


@dataclass(frozen=True)
class Judgement:
    """
    Outcome of judging one bet.

    winner_id/loser_id are only set for a decisive head-to-head result.
    """

    status: BetStatus
    outcome_value: PickValue
    winners: tuple[int, ...] = ()
    void_reason: str | None = None
    winner_id: int | None = None
    loser_id: int | None = None

    @property
    def is_void(self) -> bool:
        return self.status == BetStatus.VOID

    @classmethod
    def judged(cls, outcome_value: PickValue, winners) -> "Judgement":
        return cls(status=BetStatus.JUDGED, outcome_value=outcome_value, winners=tuple(sorted(winners)))

    @classmethod
    def void(cls, outcome_value: PickValue, reason: str) -> "Judgement":
        return cls(status=BetStatus.VOID, outcome_value=outcome_value, void_reason=reason)


class JudgingService:
    """
    Pure domain service for winner selection.

    Responsibilities:
    - Match picks against the outcome for group bets
    - Compare the two picks directly for head-to-head bets
    - Decide push / tie / no-winner voids
    """

    def __init__(self, void_yes_no_without_winners: bool = True):
        """
        Initialize judging service.

        Args:
            void_yes_no_without_winners: Void a GROUP YES_NO bet nobody called
                correctly instead of judging it with zero winners
        """
        self.void_yes_no_without_winners = void_yes_no_without_winners

    def judge(self, bet: Bet, outcome_value: PickValue) -> Judgement:
        """
        Judge a bet against an already-parsed outcome.

        Args:
            bet: Bet with its picks loaded
            outcome_value: "YES"/"NO" for YES_NO, a Decimal otherwise

        Returns:
            A JUDGED or VOID Judgement; never a partial result
        """
        if bet.is_head_to_head:
            return self._judge_head_to_head(bet, outcome_value)
        return self._judge_group(bet, outcome_value)

    @staticmethod
    def winning_side(line: Decimal, outcome_value: Decimal) -> str | None:
        """OVER/UNDER for a numeric result, None for a push."""
        if outcome_value == line:
            return None
        return "OVER" if outcome_value > line else "UNDER"

    # --- Group ---

    def _judge_group(self, bet: Bet, outcome_value: PickValue) -> Judgement:
        if not bet.picks:
            return Judgement.void(outcome_value, VOID_NO_PICKS)

        if bet.wager_type == WagerType.YES_NO:
            winners = [uid for uid, pick in bet.picks.items() if pick == outcome_value]
            if not winners and self.void_yes_no_without_winners:
                return Judgement.void(outcome_value, VOID_NO_CORRECT_PICKS)
            return Judgement.judged(outcome_value, winners)

        if bet.wager_type == WagerType.OVER_UNDER:
            side = self.winning_side(bet.line, outcome_value)
            if side is None:
                return Judgement.void(outcome_value, VOID_ON_THE_LINE)
            winners = [uid for uid, pick in bet.picks.items() if pick == side]
            if not winners:
                return Judgement.void(outcome_value, VOID_NO_CORRECT_PICKS)
            return Judgement.judged(outcome_value, winners)

        # CLOSEST_GUESS: everyone at the minimum distance wins
        distances = {uid: abs(pick - outcome_value) for uid, pick in bet.picks.items()}
        best = min(distances.values())
        return Judgement.judged(outcome_value, [uid for uid, d in distances.items() if d == best])

    # --- Head-to-head ---

    def _judge_head_to_head(self, bet: Bet, outcome_value: PickValue) -> Judgement:
        challenger, challengee = bet.challenger_id, bet.challengee_id
        challenger_pick = bet.picks.get(challenger)
        challengee_pick = bet.picks.get(challengee)

        if bet.wager_type == WagerType.CLOSEST_GUESS:
            challenger_distance = abs(challenger_pick - outcome_value)
            challengee_distance = abs(challengee_pick - outcome_value)
            if challenger_distance == challengee_distance:
                return Judgement.void(outcome_value, VOID_EXACT_TIE)
            if challenger_distance < challengee_distance:
                return self._decisive(outcome_value, challenger, challengee)
            return self._decisive(outcome_value, challengee, challenger)

        target = outcome_value
        if bet.wager_type == WagerType.OVER_UNDER:
            target = self.winning_side(bet.line, outcome_value)
            if target is None:
                return Judgement.void(outcome_value, VOID_ON_THE_LINE)

        challenger_correct = challenger_pick == target
        challengee_correct = challengee_pick == target
        if challenger_correct and challengee_correct:
            return Judgement.void(outcome_value, VOID_BOTH_CORRECT)
        if challenger_correct:
            return self._decisive(outcome_value, challenger, challengee)
        if challengee_correct:
            return self._decisive(outcome_value, challengee, challenger)
        return Judgement.void(outcome_value, VOID_NO_ONE_CORRECT)

    @staticmethod
    def _decisive(outcome_value: PickValue, winner_id: int, loser_id: int) -> Judgement:
        return Judgement(
            status=BetStatus.JUDGED,
            outcome_value=outcome_value,
            winners=(winner_id,),
            winner_id=winner_id,
            loser_id=loser_id,
        )
