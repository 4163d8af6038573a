"""
Handles bet creation, challenge acceptance and bet reads.
"""

import logging
import time

from domain.models.bet import (
    Bet,
    BetMode,
    BetStatus,
    ChallengeStatus,
    OddsRatio,
    PICK_TOKENS,
    WagerType,
    format_value,
)
from repositories.interfaces import IBetRepository
from services.bet_validation import validate_bet_creation, validate_pick_value
from services.errors import (
    AlreadySettled,
    BetNotFound,
    ChallengeNotPending,
    Unauthorized,
    ValidationError,
)
from services.interfaces import IActivityFeedService, IBetService, INotificationService

logger = logging.getLogger("sidebet.services.bets")

VOID_CHALLENGE_DECLINED = "challenge declined"
VOID_CHALLENGE_EXPIRED = "challenge expired"


class BetService(IBetService):
    """
    Encapsulates bet operations outside of picking and settlement:
    - Creating group bets and head-to-head challenges
    - Declining and expiring challenges
    - Closing betting early
    - Reads for the surrounding application
    """

    def __init__(
        self,
        bet_repo: IBetRepository,
        notification_service: INotificationService | None = None,
        activity_service: IActivityFeedService | None = None,
    ):
        self.bet_repo = bet_repo
        self.notification_service = notification_service
        self.activity_service = activity_service

    def create_bet(
        self,
        group_id: int,
        creator_id: int,
        title: str,
        wager_type: WagerType,
        wager_amount: int,
        closes_at: int,
        line=None,
        description: str = "",
    ) -> Bet:
        """
        Create an OPEN group bet with no picks.

        Args:
            group_id: Group whose ledger the bet settles into
            creator_id: The only user allowed to judge it
            title: Short description shown to participants
            wager_type: YES_NO, OVER_UNDER or CLOSEST_GUESS
            wager_amount: Stake per participant, in cents
            closes_at: Unix timestamp when picks stop being accepted
            line: Threshold for OVER_UNDER bets

        Raises:
            ValidationError: If any term is out of range or the group is missing
        """
        if group_id is None:
            raise ValidationError("Group bets require a group.")
        now = int(time.time())
        parsed_line = validate_bet_creation(title, wager_type, wager_amount, closes_at, now, line).unwrap()

        bet_id = self.bet_repo.create_bet(
            group_id=group_id,
            creator_id=creator_id,
            title=title.strip(),
            wager_type=wager_type.value,
            wager_amount=wager_amount,
            created_at=now,
            closes_at=closes_at,
            line=format_value(parsed_line) if parsed_line is not None else None,
            description=description,
        )
        bet = self.bet_repo.get_bet(bet_id)
        logger.info(f"Bet {bet_id} created in group {group_id} by {creator_id}: {wager_type.value}")

        self._safely("record bet creation", bet_id, lambda: self._record_created(bet))
        return bet

    def create_challenge(
        self,
        challenger_id: int,
        challengee_id: int,
        title: str,
        wager_type: WagerType,
        wager_amount: int,
        closes_at: int,
        challenger_pick,
        line=None,
        odds: OddsRatio | None = None,
        group_id: int | None = None,
        description: str = "",
    ) -> Bet:
        """
        Create a pending head-to-head challenge with the challenger's pick.

        The challenge is accepted by the challengee submitting their own pick.
        """
        if challenger_id == challengee_id:
            raise ValidationError("You cannot challenge yourself.")

        now = int(time.time())
        parsed_line = validate_bet_creation(title, wager_type, wager_amount, closes_at, now, line).unwrap()
        pick = validate_pick_value(wager_type, challenger_pick).unwrap()

        bet_id = self.bet_repo.create_challenge(
            challenger_id=challenger_id,
            challengee_id=challengee_id,
            title=title.strip(),
            wager_type=wager_type.value,
            wager_amount=wager_amount,
            created_at=now,
            closes_at=closes_at,
            challenger_pick=format_value(pick),
            line=format_value(parsed_line) if parsed_line is not None else None,
            odds=(odds.challenger_share, odds.challengee_share) if odds else None,
            group_id=group_id,
            description=description,
        )
        bet = self.bet_repo.get_bet(bet_id)
        logger.info(f"Challenge {bet_id} created: {challenger_id} vs {challengee_id}")

        if self.notification_service:
            self._safely("notify challengee", bet_id, lambda: self.notification_service.notify_challenge(bet))
        self._safely("record bet creation", bet_id, lambda: self._record_created(bet))
        return bet

    # --- Challenge acceptance ---

    def decline_challenge(self, bet_id: int, user_id: int) -> Bet:
        """Decline a pending challenge; the bet is voided with nothing staked."""
        bet = self.get_bet(bet_id)
        if bet.mode != BetMode.HEAD_TO_HEAD or user_id != bet.challengee_id:
            raise Unauthorized("Only the challenged user can decline this challenge.")
        if bet.challenge_status != ChallengeStatus.PENDING:
            raise ChallengeNotPending("This challenge is no longer pending.")

        self.bet_repo.void_bet_atomic(
            bet_id,
            VOID_CHALLENGE_DECLINED,
            int(time.time()),
            challenge_status=ChallengeStatus.DECLINED,
        )
        logger.info(f"Challenge {bet_id} declined by {user_id}")
        return self.bet_repo.get_bet(bet_id)

    def expire_stale_challenges(self, now: int | None = None) -> list[int]:
        """
        Void every pending challenge whose closing time has passed.

        Returns:
            IDs of the challenges voided by this call
        """
        now = int(time.time()) if now is None else now
        expired = []
        for bet_id in self.bet_repo.get_expired_pending_challenges(now):
            try:
                self.bet_repo.void_bet_atomic(bet_id, VOID_CHALLENGE_EXPIRED, now)
            except AlreadySettled:
                # Settled or declined since the scan
                continue
            expired.append(bet_id)

        if expired:
            logger.info(f"Expired {len(expired)} stale challenges: {expired}")
        return expired

    # --- Early close ---

    def close_betting(self, bet_id: int, user_id: int) -> Bet:
        """Let the creator stop accepting picks before closes_at."""
        bet = self.get_bet(bet_id)
        if user_id != bet.creator_id:
            raise Unauthorized("Only the bet creator can close betting.")
        if bet.is_settled:
            raise AlreadySettled(f"This bet is already {bet.status.value}.")

        if self.bet_repo.close_betting(bet_id, int(time.time())):
            logger.info(f"Betting closed early on bet {bet_id}")
        return self.bet_repo.get_bet(bet_id)

    # --- Reads ---

    def get_bet(self, bet_id: int) -> Bet:
        bet = self.bet_repo.get_bet(bet_id)
        if not bet:
            raise BetNotFound("Bet not found.")
        return bet

    def get_group_bets(self, group_id: int, status=None) -> list[Bet]:
        status_value = status.value if isinstance(status, BetStatus) else status
        return self.bet_repo.get_bets_by_group(group_id, status=status_value)

    def get_user_open_bets(self, user_id: int) -> list[Bet]:
        return self.bet_repo.get_open_bets_for_user(user_id)

    def get_live_percentages(self, bet_id: int) -> dict[str, float]:
        """
        Share of picks per side, as percentages summing to 100.

        Every side of the wager type is present (0.0 with no picks).
        CLOSEST_GUESS bets have no sides and return an empty mapping.
        """
        bet = self.get_bet(bet_id)
        if bet.wager_type == WagerType.CLOSEST_GUESS:
            return {}

        counts = self.bet_repo.get_pick_counts(bet_id)
        sides = sorted(PICK_TOKENS[bet.wager_type])
        total = sum(counts.get(side, 0) for side in sides)
        if total == 0:
            return {side: 0.0 for side in sides}
        return {side: round(counts.get(side, 0) * 100 / total, 1) for side in sides}

    # --- Helpers ---

    def _record_created(self, bet: Bet) -> None:
        if self.activity_service and bet.group_id is not None:
            self.activity_service.record_bet_created(bet)

    @staticmethod
    def _safely(action: str, bet_id: int, fn) -> None:
        try:
            fn()
        except Exception:
            logger.exception(f"Failed to {action} for bet {bet_id}")
