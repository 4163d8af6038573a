"""
Schema and migration management for SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("sidebet.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        conn = self._connect()
        try:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        # Bets table: one row per wager, settlement results written in place
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bets (
                bet_id INTEGER PRIMARY KEY AUTOINCREMENT,
                mode TEXT NOT NULL,
                wager_type TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                creator_id INTEGER NOT NULL,
                group_id INTEGER CHECK (mode != 'GROUP' OR group_id IS NOT NULL),
                wager_amount INTEGER NOT NULL,
                line TEXT,
                status TEXT NOT NULL DEFAULT 'OPEN',
                created_at INTEGER NOT NULL,
                closes_at INTEGER NOT NULL,
                judged_at INTEGER,
                outcome_value TEXT,
                winners TEXT,
                payout_per_winner INTEGER NOT NULL DEFAULT 0,
                void_reason TEXT
            )
            """
        )

        # Participants: set semantics per bet
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bet_participants (
                bet_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                joined_at INTEGER NOT NULL,
                PRIMARY KEY (bet_id, user_id),
                FOREIGN KEY (bet_id) REFERENCES bets(bet_id)
            )
            """
        )

        # Picks: the primary key is what makes a second pick by the same user fail
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bet_picks (
                bet_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                value TEXT NOT NULL,
                picked_at INTEGER NOT NULL,
                PRIMARY KEY (bet_id, user_id),
                FOREIGN KEY (bet_id) REFERENCES bets(bet_id)
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        try:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
        except sqlite3.OperationalError:
            pass

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("create_ledger_entries_table", self._migration_create_ledger_entries_table),
            ("add_head_to_head_columns", self._migration_add_head_to_head_columns),
            ("create_notifications_table", self._migration_create_notifications_table),
            ("create_activities_table", self._migration_create_activities_table),
            ("add_indexes_v1", self._migration_add_indexes_v1),
        ]

    # --- Migrations ---

    def _migration_create_ledger_entries_table(self, cursor) -> None:
        """Per-group running balance, written only by settlement."""
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS ledger_entries (
                group_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                balance INTEGER NOT NULL DEFAULT 0,
                wins INTEGER NOT NULL DEFAULT 0,
                losses INTEGER NOT NULL DEFAULT 0,
                total_bets INTEGER NOT NULL DEFAULT 0,
                updated_at INTEGER,
                PRIMARY KEY (group_id, user_id)
            )
            """
        )

    def _migration_add_head_to_head_columns(self, cursor) -> None:
        """Two-party challenge columns: parties, acceptance, odds, decisive result."""
        self._add_column_if_not_exists(cursor, "bets", "challenger_id", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "challengee_id", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "challenge_status", "TEXT")
        self._add_column_if_not_exists(cursor, "bets", "challenge_accepted_at", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "odds_challenger", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "odds_challengee", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "winner_id", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "loser_id", "INTEGER")
        self._add_column_if_not_exists(cursor, "bets", "winner_payout", "INTEGER")

    def _migration_create_notifications_table(self, cursor) -> None:
        """Outbox of user notifications; delivery happens elsewhere."""
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS notifications (
                notification_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                type TEXT NOT NULL,
                title TEXT NOT NULL,
                message TEXT NOT NULL,
                bet_id INTEGER,
                bet_title TEXT,
                from_user_id INTEGER,
                amount INTEGER,
                read INTEGER NOT NULL DEFAULT 0,
                created_at INTEGER NOT NULL
            )
            """
        )

    def _migration_create_activities_table(self, cursor) -> None:
        """Group activity feed entries, display only."""
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS activities (
                activity_id INTEGER PRIMARY KEY AUTOINCREMENT,
                group_id INTEGER NOT NULL,
                type TEXT NOT NULL,
                user_id INTEGER NOT NULL,
                bet_id INTEGER,
                bet_title TEXT,
                win_amount INTEGER,
                created_at INTEGER NOT NULL
            )
            """
        )

    def _migration_add_indexes_v1(self, cursor) -> None:
        """
        Add indexes for the common access patterns:
        group bet listings, reaper scans, leaderboards, per-user feeds.
        """
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_group_status ON bets(group_id, status)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_status_closes ON bets(status, closes_at)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bet_participants_user ON bet_participants(user_id)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_ledger_group_balance ON ledger_entries(group_id, balance DESC)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, created_at DESC)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_activities_group ON activities(group_id, created_at DESC)"
        )
