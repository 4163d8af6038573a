"""
Settlement orchestration: judge, pay out, update ledgers, notify.
"""

import logging
import time
from dataclasses import dataclass, field

from config import SETTLEMENT_MAX_ATTEMPTS, SETTLEMENT_RETRY_DELAY_SECONDS
from domain.models.bet import Bet, BetStatus, PickValue, format_value
from domain.models.ledger import LedgerDelta
from domain.services.judging_service import Judgement, JudgingService
from domain.services.payout_service import Payout, PayoutService
from repositories.interfaces import IBetRepository
from services.bet_validation import validate_bet_judging, validate_outcome_value
from services.errors import BetNotFound, ConsistencyError
from services.interfaces import IActivityFeedService, INotificationService, ISettlementService

logger = logging.getLogger("sidebet.services.settlement")


@dataclass
class Settlement:
    """What one committed settlement did."""

    bet_id: int
    status: BetStatus
    outcome_value: PickValue
    winners: list[int] = field(default_factory=list)
    payout_per_winner: int = 0
    pot: int = 0
    void_reason: str | None = None
    winner_id: int | None = None
    loser_id: int | None = None
    winner_payout: int | None = None
    ledger_deltas: list[LedgerDelta] = field(default_factory=list)
    attempts: int = 1

    @property
    def is_void(self) -> bool:
        return self.status == BetStatus.VOID


class SettlementService(ISettlementService):
    """
    Runs a judging action as one unit:
    judge -> payout -> ledger deltas -> terminal bet write.

    The ledger deltas and the terminal write are committed in a single
    storage transaction that only applies while the bet is OPEN. A rolled
    back batch (ConsistencyError) is retried from a fresh read; typed domain
    failures are raised to the caller immediately.
    """

    def __init__(
        self,
        bet_repo: IBetRepository,
        judging_service: JudgingService | None = None,
        payout_service: PayoutService | None = None,
        notification_service: INotificationService | None = None,
        activity_service: IActivityFeedService | None = None,
        max_attempts: int = SETTLEMENT_MAX_ATTEMPTS,
        retry_delay_seconds: float = SETTLEMENT_RETRY_DELAY_SECONDS,
    ):
        self.bet_repo = bet_repo
        self.judging_service = judging_service or JudgingService()
        self.payout_service = payout_service or PayoutService()
        self.notification_service = notification_service
        self.activity_service = activity_service
        self.max_attempts = max(1, max_attempts)
        self.retry_delay_seconds = retry_delay_seconds

    def judge(self, bet_id: int, outcome_value, judged_by: int) -> Settlement:
        """
        Judge a bet and settle it.

        Args:
            bet_id: Bet to judge
            outcome_value: YES/NO for YES_NO bets, the numeric result otherwise
            judged_by: Must be the bet's creator

        Returns:
            Settlement describing the committed result

        Raises:
            BetNotFound, Unauthorized, AlreadySettled, NotYetClosed,
            ChallengeNotAccepted, InvalidValue: nothing was written
            ConsistencyError: every attempt was rolled back; the bet is still OPEN
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                bet, settlement = self._settle_once(bet_id, outcome_value, judged_by)
                break
            except ConsistencyError as exc:
                if attempt >= self.max_attempts:
                    logger.error(f"Settlement of bet {bet_id} failed after {attempt} attempts: {exc}")
                    raise
                logger.warning(f"Settlement of bet {bet_id} rolled back (attempt {attempt}), retrying: {exc}")
                if self.retry_delay_seconds > 0:
                    time.sleep(self.retry_delay_seconds)

        settlement.attempts = attempt
        logger.info(
            f"Bet {bet_id} settled: status={settlement.status.value}, "
            f"winners={len(settlement.winners)}, payout_per_winner={settlement.payout_per_winner}"
            + (f", void_reason={settlement.void_reason}" if settlement.void_reason else "")
        )
        self._dispatch_side_effects(bet, settlement)
        return settlement

    def _settle_once(self, bet_id: int, outcome_value, judged_by: int) -> tuple[Bet, Settlement]:
        bet = self.bet_repo.get_bet(bet_id)
        if not bet:
            raise BetNotFound("Bet not found.")

        now = int(time.time())
        validate_bet_judging(bet, judged_by, now).raise_for_failure()
        outcome = validate_outcome_value(bet.wager_type, outcome_value).unwrap()

        judgement = self.judging_service.judge(bet, outcome)
        payout = self.payout_service.compute_payout(bet, judgement.winners)
        deltas = self.payout_service.build_ledger_deltas(bet, judgement, payout)
        settlement = self._build_settlement(bet, judgement, payout, deltas)

        self.bet_repo.settle_bet_atomic(
            bet_id,
            status=settlement.status.value,
            outcome_value=format_value(outcome),
            winners=settlement.winners,
            payout_per_winner=settlement.payout_per_winner,
            judged_at=now,
            expected_participants=set(bet.participants),
            void_reason=settlement.void_reason,
            winner_id=settlement.winner_id,
            loser_id=settlement.loser_id,
            winner_payout=settlement.winner_payout,
            ledger_deltas=deltas,
        )
        return bet, settlement

    @staticmethod
    def _build_settlement(
        bet: Bet, judgement: Judgement, payout: Payout, deltas: list[LedgerDelta]
    ) -> Settlement:
        if judgement.is_void:
            return Settlement(
                bet_id=bet.bet_id,
                status=BetStatus.VOID,
                outcome_value=judgement.outcome_value,
                pot=payout.pot,
                void_reason=judgement.void_reason,
            )
        return Settlement(
            bet_id=bet.bet_id,
            status=BetStatus.JUDGED,
            outcome_value=judgement.outcome_value,
            winners=list(judgement.winners),
            payout_per_winner=payout.payout_per_winner,
            pot=payout.pot,
            winner_id=judgement.winner_id,
            loser_id=judgement.loser_id,
            winner_payout=payout.payout_per_winner if judgement.winner_id is not None else None,
            ledger_deltas=deltas,
        )

    # --- Side effects ---

    def _dispatch_side_effects(self, bet: Bet, settlement: Settlement) -> None:
        """Notify every participant and feed each winner's payout. Failures are logged only."""
        winners = set(settlement.winners)
        for user_id in sorted(bet.participants):
            won = user_id in winners
            if self.notification_service:
                try:
                    self.notification_service.notify_settlement(
                        bet, user_id, won=won, amount=settlement.payout_per_winner if won else 0
                    )
                except Exception:
                    logger.exception(f"Failed to notify user {user_id} about bet {bet.bet_id}")
            if won and self.activity_service:
                try:
                    self.activity_service.record_bet_judged(bet, user_id, win_amount=settlement.payout_per_winner)
                except Exception:
                    logger.exception(f"Failed to record activity for bet {bet.bet_id}")
