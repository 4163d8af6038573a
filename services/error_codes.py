"""
Standard error codes for the service layer.

These codes let callers handle specific failures programmatically without
parsing error message text. Every BetError carries one of them.

Usage:
    from services.error_codes import BET_CLOSED
    from services.result import Result

    if bet.is_closed(now):
        return Result.fail("Betting is closed for this bet.", code=BET_CLOSED)
"""

# General errors
VALIDATION_ERROR = "validation_error"
STATE_ERROR = "state_error"
PERMISSION_DENIED = "permission_denied"

# Bet errors
BET_NOT_FOUND = "bet_not_found"
INVALID_VALUE = "invalid_value"
UNAUTHORIZED = "unauthorized"

# Lifecycle errors
BET_CLOSED = "bet_closed"
NOT_YET_CLOSED = "not_yet_closed"
ALREADY_SETTLED = "already_settled"
DUPLICATE_PICK = "duplicate_pick"

# Head-to-head errors
CHALLENGE_NOT_PENDING = "challenge_not_pending"
CHALLENGE_NOT_ACCEPTED = "challenge_not_accepted"

# Storage errors
CONSISTENCY_ERROR = "consistency_error"
