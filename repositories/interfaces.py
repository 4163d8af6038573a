"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod

from domain.models.bet import Bet, ChallengeStatus
from domain.models.ledger import LedgerDelta, LedgerEntry


class IBetRepository(ABC):
    """Repository for bets, participants and picks."""

    @abstractmethod
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
        """Create an OPEN group bet and return its ID."""
        ...

    @abstractmethod
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
        """Create an OPEN head-to-head bet with the challenger's pick recorded."""
        ...

    @abstractmethod
    def get_bet(self, bet_id: int) -> Bet | None:
        """Point read with participants and picks loaded."""
        ...

    @abstractmethod
    def get_bets_by_group(self, group_id: int, status: str | None = None) -> list[Bet]: ...

    @abstractmethod
    def get_open_bets_for_user(self, user_id: int) -> list[Bet]: ...

    @abstractmethod
    def add_pick_atomic(self, bet_id: int, user_id: int, value: str, now: int) -> Bet:
        """Store one pick and join the participant set, or raise."""
        ...

    @abstractmethod
    def close_betting(self, bet_id: int, now: int) -> bool:
        """Move closes_at to now for an OPEN bet. Returns True if it changed."""
        ...

    @abstractmethod
    def void_bet_atomic(
        self,
        bet_id: int,
        reason: str,
        now: int,
        challenge_status: ChallengeStatus | None = None,
    ) -> None:
        """Void an OPEN bet without touching any ledger."""
        ...

    @abstractmethod
    def get_expired_pending_challenges(self, now: int) -> list[int]: ...

    @abstractmethod
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
        """Write the terminal bet fields and all ledger deltas as one batch."""
        ...

    @abstractmethod
    def get_pick_counts(self, bet_id: int) -> dict[str, int]: ...


class ILedgerRepository(ABC):
    """Read access to per-group ledgers. Writes go through settlement only."""

    @abstractmethod
    def get_entry(self, group_id: int, user_id: int) -> LedgerEntry | None: ...

    @abstractmethod
    def get_group_entries(self, group_id: int, limit: int | None = None) -> list[LedgerEntry]: ...

    @abstractmethod
    def get_user_entries(self, user_id: int) -> list[LedgerEntry]: ...


class IActivityRepository(ABC):
    """Notification outbox and group activity feed."""

    @abstractmethod
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
    ) -> int: ...

    @abstractmethod
    def get_notifications(self, user_id: int, unread_only: bool = False) -> list[dict]: ...

    @abstractmethod
    def mark_notifications_read(self, user_id: int) -> int: ...

    @abstractmethod
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
    ) -> int: ...

    @abstractmethod
    def get_group_activities(self, group_id: int, limit: int = 50) -> list[dict]: ...
