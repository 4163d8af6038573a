"""
Domain services containing pure business logic.
"""

from domain.services.judging_service import Judgement, JudgingService
from domain.services.payout_service import Payout, PayoutService

__all__ = ["Judgement", "JudgingService", "Payout", "PayoutService"]
