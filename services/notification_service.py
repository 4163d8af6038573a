"""
Notification outbox for bet lifecycle events.

Rows are persisted for an external delivery worker; nothing here talks to a
transport.
"""

import logging
import time

from domain.models.bet import Bet
from repositories.interfaces import IActivityRepository
from services.interfaces import INotificationService

logger = logging.getLogger("sidebet.services.notifications")

TYPE_BET_RESOLVED = "bet_resolved"
TYPE_BET_WON = "bet_won"
TYPE_CHALLENGE = "challenge"


def format_cents(amount: int) -> str:
    """Render cents as dollars, e.g. 2050 -> "20.50"."""
    sign = "-" if amount < 0 else ""
    dollars, cents = divmod(abs(amount), 100)
    return f"{sign}{dollars:,}.{cents:02d}"


class NotificationService(INotificationService):
    """Builds and stores user notifications."""

    def __init__(self, activity_repo: IActivityRepository):
        self.activity_repo = activity_repo

    def notify_settlement(self, bet: Bet, user_id: int, won: bool, amount: int = 0) -> int:
        """One resolution notice for a participant of a settled bet."""
        if won:
            title = "You Won!"
            message = f'You won ${format_cents(amount)} on "{bet.title}"!'
            notification_type = TYPE_BET_WON
        else:
            title = "Bet Resolved"
            message = f'"{bet.title}" has been resolved'
            notification_type = TYPE_BET_RESOLVED

        return self.activity_repo.add_notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            created_at=int(time.time()),
            bet_id=bet.bet_id,
            bet_title=bet.title,
            amount=amount if won else None,
        )

    def notify_challenge(self, bet: Bet) -> int:
        """Tell the challengee about a new head-to-head challenge."""
        stake = bet.stake_for(bet.challengee_id)
        return self.activity_repo.add_notification(
            user_id=bet.challengee_id,
            type=TYPE_CHALLENGE,
            title="New Challenge!",
            message=f'You have been challenged on "{bet.title}" for ${format_cents(stake)}',
            created_at=int(time.time()),
            bet_id=bet.bet_id,
            bet_title=bet.title,
            from_user_id=bet.challenger_id,
            amount=stake,
        )

    def get_notifications(self, user_id: int, unread_only: bool = False) -> list[dict]:
        return self.activity_repo.get_notifications(user_id, unread_only=unread_only)

    def mark_all_read(self, user_id: int) -> int:
        count = self.activity_repo.mark_notifications_read(user_id)
        logger.debug(f"Marked {count} notifications read for user {user_id}")
        return count
