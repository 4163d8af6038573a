"""
Repository for the notification outbox and group activity feed.
"""

from __future__ import annotations

from repositories.base_repository import BaseRepository
from repositories.interfaces import IActivityRepository


class ActivityRepository(BaseRepository, IActivityRepository):
    """
    Handles the notifications and activities tables.

    Both are append-only records written after a lifecycle change commits;
    nothing in settlement reads them back.
    """

    def add_notification(
        self,
        *,
        user_id: int,
        type: str,
        title: str,
        message: str,
        created_at: int,
        bet_id: int | None = None,
        bet_title: str | None = None,
        from_user_id: int | None = None,
        amount: int | None = None,
    ) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO notifications (
                    user_id, type, title, message, bet_id, bet_title,
                    from_user_id, amount, read, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?)
                """,
                (user_id, type, title, message, bet_id, bet_title, from_user_id, amount, created_at),
            )
            return cursor.lastrowid

    def get_notifications(self, user_id: int, unread_only: bool = False) -> list[dict]:
        """A user's notifications, newest first."""
        query = "SELECT * FROM notifications WHERE user_id = ?"
        if unread_only:
            query += " AND read = 0"
        query += " ORDER BY created_at DESC, notification_id DESC"

        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, (user_id,))
            return [dict(row) for row in cursor.fetchall()]

    def mark_notifications_read(self, user_id: int) -> int:
        """Mark all of a user's notifications read. Returns how many changed."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE notifications SET read = 1 WHERE user_id = ? AND read = 0",
                (user_id,),
            )
            return cursor.rowcount

    def add_activity(
        self,
        *,
        group_id: int,
        type: str,
        user_id: int,
        created_at: int,
        bet_id: int | None = None,
        bet_title: str | None = None,
        win_amount: int | None = None,
    ) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO activities (
                    group_id, type, user_id, bet_id, bet_title, win_amount, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (group_id, type, user_id, bet_id, bet_title, win_amount, created_at),
            )
            return cursor.lastrowid

    def get_group_activities(self, group_id: int, limit: int = 50) -> list[dict]:
        """Recent activity for a group, newest first."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM activities
                WHERE group_id = ?
                ORDER BY created_at DESC, activity_id DESC
                LIMIT ?
                """,
                (group_id, limit),
            )
            return [dict(row) for row in cursor.fetchall()]
