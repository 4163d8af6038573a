"""
Repository for per-group ledger entries.
"""

from __future__ import annotations

import sqlite3

from domain.models.ledger import LedgerEntry
from repositories.base_repository import BaseRepository
from repositories.interfaces import ILedgerRepository


class LedgerRepository(BaseRepository, ILedgerRepository):
    """
    Read access to the ledger_entries table.

    Rows are only written by BetRepository.settle_bet_atomic, inside the
    same transaction as the bet's terminal state.
    """

    def get_entry(self, group_id: int, user_id: int) -> LedgerEntry | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM ledger_entries WHERE group_id = ? AND user_id = ?",
                (group_id, user_id),
            )
            row = cursor.fetchone()
            return self._row_to_entry(row) if row else None

    def get_group_entries(self, group_id: int, limit: int | None = None) -> list[LedgerEntry]:
        """Entries for a group, highest balance first (ties broken by wins)."""
        query = """
            SELECT * FROM ledger_entries
            WHERE group_id = ?
            ORDER BY balance DESC, wins DESC, user_id ASC
        """
        params: tuple = (group_id,)
        if limit is not None:
            query += " LIMIT ?"
            params = (group_id, limit)

        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_entry(row) for row in cursor.fetchall()]

    def get_user_entries(self, user_id: int) -> list[LedgerEntry]:
        """A user's entries across every group."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM ledger_entries WHERE user_id = ? ORDER BY group_id ASC",
                (user_id,),
            )
            return [self._row_to_entry(row) for row in cursor.fetchall()]

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> LedgerEntry:
        return LedgerEntry(
            group_id=row["group_id"],
            user_id=row["user_id"],
            balance=row["balance"],
            wins=row["wins"],
            losses=row["losses"],
            total_bets=row["total_bets"],
            updated_at=row["updated_at"],
        )
