"""
Group activity feed.
"""

import time

from domain.models.bet import Bet
from repositories.interfaces import IActivityRepository
from services.interfaces import IActivityFeedService

ACTIVITY_BET_CREATED = "bet_created"
ACTIVITY_BET_JUDGED = "bet_judged"


class ActivityFeedService(IActivityFeedService):
    """Records display-only activity entries for group bets."""

    def __init__(self, activity_repo: IActivityRepository):
        self.activity_repo = activity_repo

    def record_bet_created(self, bet: Bet) -> int | None:
        if bet.group_id is None:
            return None
        return self.activity_repo.add_activity(
            group_id=bet.group_id,
            type=ACTIVITY_BET_CREATED,
            user_id=bet.creator_id,
            created_at=int(time.time()),
            bet_id=bet.bet_id,
            bet_title=bet.title,
        )

    def record_bet_judged(self, bet: Bet, user_id: int, win_amount: int | None = None) -> int | None:
        if bet.group_id is None:
            return None
        return self.activity_repo.add_activity(
            group_id=bet.group_id,
            type=ACTIVITY_BET_JUDGED,
            user_id=user_id,
            created_at=int(time.time()),
            bet_id=bet.bet_id,
            bet_title=bet.title,
            win_amount=win_amount,
        )

    def get_feed(self, group_id: int, limit: int = 50) -> list[dict]:
        return self.activity_repo.get_group_activities(group_id, limit=limit)
