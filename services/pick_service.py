"""
Pick collection for open bets.
"""

import logging
import time

from domain.models.bet import Bet, format_value
from repositories.interfaces import IBetRepository
from services.bet_validation import validate_can_pick, validate_pick_value
from services.errors import BetNotFound
from services.interfaces import IPickService

logger = logging.getLogger("sidebet.services.picks")


class PickService(IPickService):
    """
    Accepts one immutable pick per user per bet.

    The checks here run against a snapshot and only give the common cases a
    clean error; the repository repeats the closing and duplicate checks
    under the write lock, so a racing second submission still fails.
    """

    def __init__(self, bet_repo: IBetRepository):
        self.bet_repo = bet_repo

    def submit_pick(self, bet_id: int, user_id: int, value) -> Bet:
        """
        Record a pick and add the user to the participants.

        Args:
            bet_id: Bet to pick on
            user_id: Picking user
            value: YES/NO, OVER/UNDER (any case) or a number for CLOSEST_GUESS

        Returns:
            The bet as stored after the pick

        Raises:
            BetNotFound, BetClosed, Unauthorized, DuplicatePick, InvalidValue
        """
        bet = self.bet_repo.get_bet(bet_id)
        if not bet:
            raise BetNotFound("Bet not found.")

        now = int(time.time())
        validate_can_pick(bet, user_id, now).raise_for_failure()
        pick = validate_pick_value(bet.wager_type, value).unwrap()

        updated = self.bet_repo.add_pick_atomic(bet_id, user_id, format_value(pick), now)
        logger.info(f"User {user_id} picked {format_value(pick)} on bet {bet_id}")
        return updated
