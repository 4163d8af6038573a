"""
Application services layer.

Services orchestrate bet lifecycle operations using repositories and domain services.
"""

# Result type and typed errors
from services.result import Result
from services.errors import (
    AlreadySettled,
    AuthorizationError,
    BetClosed,
    BetError,
    BetNotFound,
    ChallengeNotAccepted,
    ChallengeNotPending,
    ConsistencyError,
    DuplicatePick,
    InvalidValue,
    NotYetClosed,
    StateError,
    Unauthorized,
    ValidationError,
)

# Service interfaces (ABCs)
from services.interfaces import (
    IActivityFeedService,
    IBetService,
    ILedgerService,
    INotificationService,
    IPickService,
    ISettlementService,
)

from services.activity_service import ActivityFeedService
from services.bet_service import BetService
from services.ledger_service import LedgerService
from services.notification_service import NotificationService
from services.pick_service import PickService
from services.settlement_service import Settlement, SettlementService

__all__ = [
    # Concrete services
    "ActivityFeedService",
    "BetService",
    "LedgerService",
    "NotificationService",
    "PickService",
    "Settlement",
    "SettlementService",
    # Result type
    "Result",
    # Errors
    "AlreadySettled",
    "AuthorizationError",
    "BetClosed",
    "BetError",
    "BetNotFound",
    "ChallengeNotAccepted",
    "ChallengeNotPending",
    "ConsistencyError",
    "DuplicatePick",
    "InvalidValue",
    "NotYetClosed",
    "StateError",
    "Unauthorized",
    "ValidationError",
    # Interfaces
    "IActivityFeedService",
    "IBetService",
    "ILedgerService",
    "INotificationService",
    "IPickService",
    "ISettlementService",
]
