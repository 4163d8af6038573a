"""
Repository layer for data access abstraction.
"""

from repositories.activity_repository import ActivityRepository
from repositories.base_repository import BaseRepository
from repositories.bet_repository import BetRepository
from repositories.interfaces import (
    IActivityRepository,
    IBetRepository,
    ILedgerRepository,
)
from repositories.ledger_repository import LedgerRepository

__all__ = [
    "BaseRepository",
    "BetRepository",
    "LedgerRepository",
    "ActivityRepository",
    "IBetRepository",
    "ILedgerRepository",
    "IActivityRepository",
]
