"""
Domain models - pure data structures representing business entities.
"""

from domain.models.bet import (
    Bet,
    BetMode,
    BetStatus,
    ChallengeStatus,
    OddsRatio,
    WagerType,
)
from domain.models.ledger import LedgerDelta, LedgerEntry

__all__ = [
    "Bet",
    "BetMode",
    "BetStatus",
    "ChallengeStatus",
    "OddsRatio",
    "WagerType",
    "LedgerDelta",
    "LedgerEntry",
]
