"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts for the bet lifecycle
services. Services inherit from their interface so collaborators can be
swapped for fakes in tests.

Usage:
    class MyService(IMyService):
        def my_method(self, param: str) -> dict:
            ...
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domain.models.bet import Bet, OddsRatio, WagerType
    from domain.models.ledger import LedgerEntry


class IBetService(ABC):
    """Interface for bet creation, challenge acceptance and reads."""

    @abstractmethod
    def create_bet(
        self,
        group_id: int,
        creator_id: int,
        title: str,
        wager_type: "WagerType",
        wager_amount: int,
        closes_at: int,
        line=None,
        description: str = "",
    ) -> "Bet":
        """Create an OPEN group bet."""
        ...

    @abstractmethod
    def create_challenge(
        self,
        challenger_id: int,
        challengee_id: int,
        title: str,
        wager_type: "WagerType",
        wager_amount: int,
        closes_at: int,
        challenger_pick,
        line=None,
        odds: "OddsRatio | None" = None,
        group_id: int | None = None,
        description: str = "",
    ) -> "Bet":
        """Create a pending head-to-head challenge."""
        ...

    @abstractmethod
    def decline_challenge(self, bet_id: int, user_id: int) -> "Bet":
        """Decline a pending challenge (voids the bet)."""
        ...

    @abstractmethod
    def expire_stale_challenges(self, now: int | None = None) -> list[int]:
        """Void unaccepted challenges past their closing time."""
        ...

    @abstractmethod
    def close_betting(self, bet_id: int, user_id: int) -> "Bet":
        """Creator closes betting early."""
        ...

    @abstractmethod
    def get_bet(self, bet_id: int) -> "Bet":
        """Point read; raises BetNotFound."""
        ...

    @abstractmethod
    def get_group_bets(self, group_id: int, status=None) -> list["Bet"]:
        """All bets of a group, optionally filtered by status."""
        ...

    @abstractmethod
    def get_user_open_bets(self, user_id: int) -> list["Bet"]:
        """OPEN bets the user is part of."""
        ...

    @abstractmethod
    def get_live_percentages(self, bet_id: int) -> dict[str, float]:
        """Share of picks per side."""
        ...


class IPickService(ABC):
    """Interface for pick collection."""

    @abstractmethod
    def submit_pick(self, bet_id: int, user_id: int, value) -> "Bet":
        """Record one immutable pick."""
        ...


class ISettlementService(ABC):
    """Interface for judging and settlement."""

    @abstractmethod
    def judge(self, bet_id: int, outcome_value, judged_by: int) -> Any:
        """Judge a bet and apply its settlement atomically."""
        ...


class ILedgerService(ABC):
    """Interface for ledger reporting."""

    @abstractmethod
    def get_entry(self, group_id: int, user_id: int) -> "LedgerEntry":
        """A user's entry in a group (zeroed if absent)."""
        ...

    @abstractmethod
    def get_leaderboard(self, group_id: int, limit: int = 10) -> list[dict]:
        """Group leaderboard ordered by balance."""
        ...


class INotificationService(ABC):
    """Interface for the notification outbox."""

    @abstractmethod
    def notify_settlement(self, bet: "Bet", user_id: int, won: bool, amount: int = 0) -> int:
        """Record a resolution notice for one participant."""
        ...

    @abstractmethod
    def notify_challenge(self, bet: "Bet") -> int:
        """Record a new-challenge notice for the challengee."""
        ...


class IActivityFeedService(ABC):
    """Interface for the group activity feed."""

    @abstractmethod
    def record_bet_created(self, bet: "Bet") -> int | None:
        """Record that a group bet was created."""
        ...

    @abstractmethod
    def record_bet_judged(self, bet: "Bet", user_id: int, win_amount: int | None = None) -> int | None:
        """Record a winner's payout."""
        ...
