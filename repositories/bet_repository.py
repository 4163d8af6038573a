"""
Repository for bets, their participants and picks.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from decimal import Decimal

from domain.models.bet import (
    Bet,
    BetMode,
    BetStatus,
    ChallengeStatus,
    OddsRatio,
    WagerType,
    load_outcome,
    load_value,
)
from domain.models.ledger import LedgerDelta
from repositories.base_repository import BaseRepository
from repositories.interfaces import IBetRepository
from services.errors import (
    AlreadySettled,
    BetClosed,
    BetNotFound,
    ConsistencyError,
    DuplicatePick,
    Unauthorized,
)

logger = logging.getLogger("sidebet.repositories.bet")


class BetRepository(BaseRepository, IBetRepository):
    """
    Handles CRUD and atomic lifecycle writes for the bets, bet_participants
    and bet_picks tables, plus the ledger rows a settlement touches.
    """

    VALID_STATUSES = {status.value for status in BetStatus}

    def create_bet(
        self,
        *,
        group_id: int,
        creator_id: int,
        title: str,
        wager_type: str,
        wager_amount: int,
        created_at: int,
        closes_at: int,
        line: str | None = None,
        description: str = "",
    ) -> int:
        """Create a new group bet and return its ID."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO bets (
                    mode, wager_type, title, description, creator_id, group_id,
                    wager_amount, line, status, created_at, closes_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'OPEN', ?, ?)
                """,
                (
                    BetMode.GROUP.value,
                    wager_type,
                    title,
                    description,
                    creator_id,
                    group_id,
                    wager_amount,
                    line,
                    created_at,
                    closes_at,
                ),
            )
            return cursor.lastrowid

    def create_challenge(
        self,
        *,
        challenger_id: int,
        challengee_id: int,
        title: str,
        wager_type: str,
        wager_amount: int,
        created_at: int,
        closes_at: int,
        challenger_pick: str,
        line: str | None = None,
        odds: tuple[int, int] | None = None,
        group_id: int | None = None,
        description: str = "",
    ) -> int:
        """
        Create a head-to-head bet atomically:
        - bet row with acceptance sub-state 'pending'
        - the challenger as the only participant, with their pick
        The challengee joins when they pick.
        """
        odds_challenger, odds_challengee = odds if odds else (None, None)

        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO bets (
                    mode, wager_type, title, description, creator_id, group_id,
                    wager_amount, line, status, created_at, closes_at,
                    challenger_id, challengee_id, challenge_status,
                    odds_challenger, odds_challengee
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'OPEN', ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    BetMode.HEAD_TO_HEAD.value,
                    wager_type,
                    title,
                    description,
                    challenger_id,
                    group_id,
                    wager_amount,
                    line,
                    created_at,
                    closes_at,
                    challenger_id,
                    challengee_id,
                    ChallengeStatus.PENDING.value,
                    odds_challenger,
                    odds_challengee,
                ),
            )
            bet_id = cursor.lastrowid

            cursor.execute(
                "INSERT INTO bet_participants (bet_id, user_id, joined_at) VALUES (?, ?, ?)",
                (bet_id, challenger_id, created_at),
            )
            cursor.execute(
                "INSERT INTO bet_picks (bet_id, user_id, value, picked_at) VALUES (?, ?, ?, ?)",
                (bet_id, challenger_id, challenger_pick, created_at),
            )
            return bet_id

    # --- Reads ---

    def get_bet(self, bet_id: int) -> Bet | None:
        """Get a bet by ID with participants and picks loaded."""
        with self.connection() as conn:
            cursor = conn.cursor()
            return self._get_bet_internal(cursor, bet_id)

    def get_bets_by_group(self, group_id: int, status: str | None = None) -> list[Bet]:
        """Get a group's bets, newest first, optionally filtered by status."""
        if status is not None and status not in self.VALID_STATUSES:
            raise ValueError(f"Invalid status: {status}")
        with self.connection() as conn:
            cursor = conn.cursor()
            if status is None:
                cursor.execute(
                    "SELECT bet_id FROM bets WHERE group_id = ? ORDER BY created_at DESC, bet_id DESC",
                    (group_id,),
                )
            else:
                cursor.execute(
                    """
                    SELECT bet_id FROM bets
                    WHERE group_id = ? AND status = ?
                    ORDER BY created_at DESC, bet_id DESC
                    """,
                    (group_id, status),
                )
            bet_ids = [row["bet_id"] for row in cursor.fetchall()]
            return [self._get_bet_internal(cursor, bet_id) for bet_id in bet_ids]

    def get_open_bets_for_user(self, user_id: int) -> list[Bet]:
        """Get OPEN bets the user participates in or is challenged on, soonest closing first."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT b.bet_id
                FROM bets b
                LEFT JOIN bet_participants p ON p.bet_id = b.bet_id AND p.user_id = ?
                WHERE b.status = 'OPEN' AND (p.user_id IS NOT NULL OR b.challengee_id = ?)
                ORDER BY b.closes_at ASC, b.bet_id ASC
                """,
                (user_id, user_id),
            )
            bet_ids = [row["bet_id"] for row in cursor.fetchall()]
            return [self._get_bet_internal(cursor, bet_id) for bet_id in bet_ids]

    def get_expired_pending_challenges(self, now: int) -> list[int]:
        """IDs of OPEN challenges never accepted before their closing time."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT bet_id FROM bets
                WHERE mode = ? AND status = 'OPEN' AND challenge_status = ? AND closes_at <= ?
                ORDER BY closes_at ASC
                """,
                (BetMode.HEAD_TO_HEAD.value, ChallengeStatus.PENDING.value, now),
            )
            return [row["bet_id"] for row in cursor.fetchall()]

    def get_pick_counts(self, bet_id: int) -> dict[str, int]:
        """Count picks per token: {"YES": n, "NO": m}. Numeric picks are not grouped."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT value, COUNT(*) AS picks
                FROM bet_picks
                WHERE bet_id = ?
                GROUP BY value
                """,
                (bet_id,),
            )
            return {row["value"]: row["picks"] for row in cursor.fetchall()}

    # --- Lifecycle writes ---

    def add_pick_atomic(self, bet_id: int, user_id: int, value: str, now: int) -> Bet:
        """
        Record a pick atomically.

        - Re-checks the bet is OPEN and before closes_at under the write lock
        - Rejects a second pick by the same user (also enforced by the primary key)
        - Adds the user to the participant set
        - Moves a head-to-head challenge to 'accepted' on the challengee's pick

        Returns the bet as stored after the pick.
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT status, closes_at, mode, challenger_id, challengee_id, challenge_status
                FROM bets WHERE bet_id = ?
                """,
                (bet_id,),
            )
            bet = cursor.fetchone()
            if not bet:
                raise BetNotFound("Bet not found.")
            if bet["status"] != BetStatus.OPEN.value or now >= bet["closes_at"]:
                raise BetClosed("Betting is closed for this bet.")

            is_head_to_head = bet["mode"] == BetMode.HEAD_TO_HEAD.value
            if is_head_to_head:
                if user_id not in (bet["challenger_id"], bet["challengee_id"]):
                    raise Unauthorized("You are not part of this challenge.")
                if bet["challenge_status"] == ChallengeStatus.DECLINED.value:
                    raise BetClosed("This challenge was declined.")

            try:
                cursor.execute(
                    "INSERT INTO bet_picks (bet_id, user_id, value, picked_at) VALUES (?, ?, ?, ?)",
                    (bet_id, user_id, value, now),
                )
            except sqlite3.IntegrityError:
                raise DuplicatePick("You have already made a pick on this bet.") from None

            cursor.execute(
                "INSERT OR IGNORE INTO bet_participants (bet_id, user_id, joined_at) VALUES (?, ?, ?)",
                (bet_id, user_id, now),
            )

            if (
                is_head_to_head
                and user_id == bet["challengee_id"]
                and bet["challenge_status"] == ChallengeStatus.PENDING.value
            ):
                cursor.execute(
                    """
                    UPDATE bets
                    SET challenge_status = ?, challenge_accepted_at = ?
                    WHERE bet_id = ?
                    """,
                    (ChallengeStatus.ACCEPTED.value, now, bet_id),
                )

            return self._get_bet_internal(cursor, bet_id)

    def close_betting(self, bet_id: int, now: int) -> bool:
        """Close betting early by pulling closes_at back to now."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE bets SET closes_at = ?
                WHERE bet_id = ? AND status = 'OPEN' AND closes_at > ?
                """,
                (now, bet_id, now),
            )
            return cursor.rowcount > 0

    def void_bet_atomic(
        self,
        bet_id: int,
        reason: str,
        now: int,
        challenge_status: ChallengeStatus | None = None,
    ) -> None:
        """
        Void an OPEN bet (declined or expired challenge).

        Only succeeds if the bet is still OPEN; otherwise raises AlreadySettled.
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE bets
                SET status = 'VOID', void_reason = ?, judged_at = ?, winners = '[]',
                    payout_per_winner = 0,
                    challenge_status = COALESCE(?, challenge_status)
                WHERE bet_id = ? AND status = 'OPEN'
                """,
                (reason, now, challenge_status.value if challenge_status else None, bet_id),
            )
            if cursor.rowcount == 0:
                self._raise_not_open(cursor, bet_id)

    def settle_bet_atomic(
        self,
        bet_id: int,
        *,
        status: str,
        outcome_value: str,
        winners: list[int],
        payout_per_winner: int,
        judged_at: int,
        expected_participants: set[int],
        void_reason: str | None = None,
        winner_id: int | None = None,
        loser_id: int | None = None,
        winner_payout: int | None = None,
        ledger_deltas: list[LedgerDelta] | None = None,
    ) -> None:
        """
        Settle a bet and apply its ledger deltas in one transaction.

        - The terminal write only applies while the bet is still OPEN, so a
          concurrent second settlement raises AlreadySettled and changes nothing
        - The participant set must still match the one that was judged
        - Every ledger entry is created on first touch and updated in place

        Raises:
            AlreadySettled / BetNotFound: the optimistic precondition failed
            ConsistencyError: storage failed mid-batch; everything was rolled back
        """
        if status not in (BetStatus.JUDGED.value, BetStatus.VOID.value):
            raise ValueError(f"Invalid terminal status: {status}")

        try:
            with self.atomic_transaction() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    UPDATE bets
                    SET status = ?, outcome_value = ?, winners = ?, payout_per_winner = ?,
                        judged_at = ?, void_reason = ?, winner_id = ?, loser_id = ?,
                        winner_payout = ?
                    WHERE bet_id = ? AND status = 'OPEN'
                    """,
                    (
                        status,
                        outcome_value,
                        json.dumps(sorted(winners)),
                        payout_per_winner,
                        judged_at,
                        void_reason,
                        winner_id,
                        loser_id,
                        winner_payout,
                        bet_id,
                    ),
                )
                if cursor.rowcount == 0:
                    self._raise_not_open(cursor, bet_id)

                current = self._get_participants_internal(cursor, bet_id)
                if current != set(expected_participants):
                    raise ConsistencyError("Participants changed while the bet was being judged.")

                if ledger_deltas:
                    cursor.execute("SELECT group_id FROM bets WHERE bet_id = ?", (bet_id,))
                    group_id = cursor.fetchone()["group_id"]
                    cursor.executemany(
                        """
                        INSERT INTO ledger_entries (
                            group_id, user_id, balance, wins, losses, total_bets, updated_at
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(group_id, user_id) DO UPDATE SET
                            balance = balance + excluded.balance,
                            wins = wins + excluded.wins,
                            losses = losses + excluded.losses,
                            total_bets = total_bets + excluded.total_bets,
                            updated_at = excluded.updated_at
                        """,
                        [
                            (
                                group_id,
                                delta.user_id,
                                delta.balance,
                                delta.wins,
                                delta.losses,
                                delta.total_bets,
                                judged_at,
                            )
                            for delta in ledger_deltas
                        ],
                    )
        except sqlite3.DatabaseError as exc:
            logger.warning(f"Settlement batch for bet {bet_id} rolled back: {exc}")
            raise ConsistencyError(f"Settlement batch failed and was rolled back: {exc}") from exc

    # --- Internal helpers (use an existing cursor inside transactions) ---

    def _raise_not_open(self, cursor, bet_id: int) -> None:
        cursor.execute("SELECT status FROM bets WHERE bet_id = ?", (bet_id,))
        row = cursor.fetchone()
        if not row:
            raise BetNotFound("Bet not found.")
        raise AlreadySettled(f"This bet is already {row['status']}.")

    def _get_participants_internal(self, cursor, bet_id: int) -> set[int]:
        cursor.execute("SELECT user_id FROM bet_participants WHERE bet_id = ?", (bet_id,))
        return {row["user_id"] for row in cursor.fetchall()}

    def _get_bet_internal(self, cursor, bet_id: int) -> Bet | None:
        cursor.execute("SELECT * FROM bets WHERE bet_id = ?", (bet_id,))
        row = cursor.fetchone()
        if not row:
            return None
        wager_type = WagerType(row["wager_type"])

        cursor.execute("SELECT user_id, value FROM bet_picks WHERE bet_id = ?", (bet_id,))
        picks = {pick["user_id"]: load_value(wager_type, pick["value"]) for pick in cursor.fetchall()}

        return self._row_to_bet(row, self._get_participants_internal(cursor, bet_id), picks)

    @staticmethod
    def _row_to_bet(row: sqlite3.Row, participants: set[int], picks: dict) -> Bet:
        wager_type = WagerType(row["wager_type"])
        odds = None
        if row["odds_challenger"] is not None and row["odds_challengee"] is not None:
            odds = OddsRatio(row["odds_challenger"], row["odds_challengee"])
        outcome = row["outcome_value"]
        return Bet(
            bet_id=row["bet_id"],
            mode=BetMode(row["mode"]),
            wager_type=wager_type,
            title=row["title"],
            description=row["description"],
            creator_id=row["creator_id"],
            group_id=row["group_id"],
            wager_amount=row["wager_amount"],
            line=Decimal(row["line"]) if row["line"] is not None else None,
            status=BetStatus(row["status"]),
            created_at=row["created_at"],
            closes_at=row["closes_at"],
            participants=participants,
            picks=picks,
            challenger_id=row["challenger_id"],
            challengee_id=row["challengee_id"],
            challenge_status=ChallengeStatus(row["challenge_status"]) if row["challenge_status"] else None,
            odds=odds,
            judged_at=row["judged_at"],
            outcome_value=load_outcome(wager_type, outcome) if outcome is not None else None,
            winners=json.loads(row["winners"]) if row["winners"] else [],
            payout_per_winner=row["payout_per_winner"] or 0,
            void_reason=row["void_reason"],
            winner_id=row["winner_id"],
            loser_id=row["loser_id"],
            winner_payout=row["winner_payout"],
        )
