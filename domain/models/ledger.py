"""
Ledger domain model.
"""

from dataclasses import dataclass


@dataclass
class LedgerEntry:
    """Running balance and record for one user within one group."""

    group_id: int
    user_id: int
    balance: int = 0  # cents, signed
    wins: int = 0
    losses: int = 0
    total_bets: int = 0
    updated_at: int | None = None

    @property
    def win_rate(self) -> float:
        decided = self.wins + self.losses
        return self.wins / decided if decided > 0 else 0.0


@dataclass(frozen=True)
class LedgerDelta:
    """Change applied to one LedgerEntry by a single settlement."""

    user_id: int
    balance: int
    wins: int
    losses: int
    total_bets: int = 1
