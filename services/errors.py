"""
Typed failures raised by the bet lifecycle services.

All of them subclass ValueError so existing `except ValueError` call sites
keep working, and each carries an error code from services.error_codes.
"""

from services import error_codes


class BetError(ValueError):
    """Base class for bet lifecycle failures."""

    code = error_codes.STATE_ERROR

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class BetNotFound(BetError):
    code = error_codes.BET_NOT_FOUND


# --- Validation ---


class ValidationError(BetError):
    """Bad input shape."""

    code = error_codes.VALIDATION_ERROR


class InvalidValue(ValidationError):
    """A pick or outcome outside the wager type's domain."""

    code = error_codes.INVALID_VALUE


# --- Authorization ---


class AuthorizationError(BetError):
    code = error_codes.PERMISSION_DENIED


class Unauthorized(AuthorizationError):
    """Actor is not allowed to perform this action on the bet."""

    code = error_codes.UNAUTHORIZED


# --- State ---


class StateError(BetError):
    """Action attempted while the bet is in the wrong state."""

    code = error_codes.STATE_ERROR


class BetClosed(StateError):
    code = error_codes.BET_CLOSED


class NotYetClosed(StateError):
    code = error_codes.NOT_YET_CLOSED


class AlreadySettled(StateError):
    code = error_codes.ALREADY_SETTLED


class DuplicatePick(StateError):
    code = error_codes.DUPLICATE_PICK


class ChallengeNotPending(StateError):
    code = error_codes.CHALLENGE_NOT_PENDING


class ChallengeNotAccepted(StateError):
    code = error_codes.CHALLENGE_NOT_ACCEPTED


# --- Storage ---


class ConsistencyError(BetError):
    """
    A settlement batch failed and was rolled back.

    The bet is still OPEN; retry the whole settlement, never patch it.
    """

    code = error_codes.CONSISTENCY_ERROR


_BY_CODE: dict[str, type[BetError]] = {
    cls.code: cls
    for cls in (
        BetNotFound,
        ValidationError,
        InvalidValue,
        AuthorizationError,
        Unauthorized,
        StateError,
        BetClosed,
        NotYetClosed,
        AlreadySettled,
        DuplicatePick,
        ChallengeNotPending,
        ChallengeNotAccepted,
        ConsistencyError,
    )
}


def error_for_code(code: str | None) -> type[BetError]:
    """Exception class for an error code (BetError when unknown)."""
    return _BY_CODE.get(code, BetError)
