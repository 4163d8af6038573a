"""
Read-only ledger reporting.
"""

from config import LEADERBOARD_DEFAULT_LIMIT
from domain.models.ledger import LedgerEntry
from repositories.interfaces import ILedgerRepository
from services.interfaces import ILedgerService


class LedgerService(ILedgerService):
    """Balances and leaderboards. Only settlement writes ledger entries."""

    def __init__(self, ledger_repo: ILedgerRepository):
        self.ledger_repo = ledger_repo

    def get_entry(self, group_id: int, user_id: int) -> LedgerEntry:
        """A user's entry in a group, zeroed if they have never settled a bet there."""
        entry = self.ledger_repo.get_entry(group_id, user_id)
        return entry or LedgerEntry(group_id=group_id, user_id=user_id)

    def get_leaderboard(self, group_id: int, limit: int = LEADERBOARD_DEFAULT_LIMIT) -> list[dict]:
        """
        Group leaderboard, highest balance first.

        Returns:
            List of dicts with rank, user_id, balance, wins, losses, total_bets, win_rate
        """
        if limit <= 0:
            raise ValueError("Limit must be positive.")
        entries = self.ledger_repo.get_group_entries(group_id, limit=limit)
        return [
            {
                "rank": rank,
                "user_id": entry.user_id,
                "balance": entry.balance,
                "wins": entry.wins,
                "losses": entry.losses,
                "total_bets": entry.total_bets,
                "win_rate": entry.win_rate,
            }
            for rank, entry in enumerate(entries, start=1)
        ]

    def get_user_ledgers(self, user_id: int) -> list[LedgerEntry]:
        return self.ledger_repo.get_user_entries(user_id)
