"""
Validation utilities for bet creation, picks and judging.

Centralizes the checks shared by the bet, pick and settlement services.
Every helper returns a Result; the services unwrap it into a typed error.
"""

from decimal import Decimal

from config import (
    BET_MAX_WAGER,
    BET_MAX_WINDOW_SECONDS,
    BET_MIN_WAGER,
    BET_TITLE_MAX_LENGTH,
    BET_TITLE_MIN_LENGTH,
)
from domain.models.bet import (
    Bet,
    BetMode,
    BetStatus,
    ChallengeStatus,
    PickValue,
    WagerType,
    parse_number,
    parse_pick_value,
)
from services import error_codes
from services.result import Result


def validate_bet_creation(
    title: str,
    wager_type: WagerType,
    wager_amount: int,
    closes_at: int,
    now: int,
    line=None,
) -> Result[Decimal | None]:
    """
    Validate the terms of a new bet.

    Returns:
        Result.ok(parsed_line) (None unless OVER_UNDER)
        Result.fail(error, VALIDATION_ERROR) otherwise
    """
    stripped = (title or "").strip()
    if len(stripped) < BET_TITLE_MIN_LENGTH:
        return Result.fail(
            f"Title must be at least {BET_TITLE_MIN_LENGTH} characters.",
            code=error_codes.VALIDATION_ERROR,
        )
    if len(stripped) > BET_TITLE_MAX_LENGTH:
        return Result.fail(
            f"Title must be less than {BET_TITLE_MAX_LENGTH} characters.",
            code=error_codes.VALIDATION_ERROR,
        )

    if not isinstance(wager_type, WagerType):
        return Result.fail("Unknown wager type.", code=error_codes.VALIDATION_ERROR)

    if isinstance(wager_amount, bool) or not isinstance(wager_amount, int):
        return Result.fail("Wager must be a whole number of cents.", code=error_codes.VALIDATION_ERROR)
    if wager_amount < BET_MIN_WAGER:
        return Result.fail(
            f"Wager must be at least {BET_MIN_WAGER} cents.",
            code=error_codes.VALIDATION_ERROR,
        )
    if wager_amount > BET_MAX_WAGER:
        return Result.fail(
            f"Wager must be at most {BET_MAX_WAGER} cents.",
            code=error_codes.VALIDATION_ERROR,
        )

    if closes_at <= now:
        return Result.fail("Closing time must be in the future.", code=error_codes.VALIDATION_ERROR)
    if closes_at - now > BET_MAX_WINDOW_SECONDS:
        days = BET_MAX_WINDOW_SECONDS // 86400
        return Result.fail(
            f"Closing time cannot be more than {days} days in the future.",
            code=error_codes.VALIDATION_ERROR,
        )

    if wager_type == WagerType.OVER_UNDER:
        if line is None:
            return Result.fail("Over/Under bets require a line value.", code=error_codes.VALIDATION_ERROR)
        try:
            return Result.ok(parse_number(line))
        except ValueError:
            return Result.fail("Line must be a number.", code=error_codes.VALIDATION_ERROR)

    if line is not None:
        return Result.fail("Only Over/Under bets take a line.", code=error_codes.VALIDATION_ERROR)
    return Result.ok(None)


def validate_pick_value(wager_type: WagerType, value) -> Result[PickValue]:
    """Normalize a pick for the wager type (token or number)."""
    try:
        return Result.ok(parse_pick_value(wager_type, value))
    except ValueError as exc:
        return Result.fail(str(exc), code=error_codes.INVALID_VALUE)


def validate_outcome_value(wager_type: WagerType, value) -> Result[PickValue]:
    """
    Normalize a judged outcome.

    YES_NO outcomes are YES/NO tokens; OVER_UNDER and CLOSEST_GUESS outcomes
    are the numeric result.
    """
    if wager_type == WagerType.YES_NO:
        return validate_pick_value(wager_type, value)
    try:
        return Result.ok(parse_number(value))
    except ValueError:
        return Result.fail("Outcome must be a number.", code=error_codes.INVALID_VALUE)


def validate_can_pick(bet: Bet, user_id: int, now: int) -> Result[None]:
    """
    Check the pick window and participation rules.

    Duplicate picks are also enforced by the storage layer; this check only
    gives the common case a clean error before opening a transaction.
    """
    if bet.is_closed(now):
        return Result.fail("Betting is closed for this bet.", code=error_codes.BET_CLOSED)

    if bet.mode == BetMode.HEAD_TO_HEAD:
        if user_id not in (bet.challenger_id, bet.challengee_id):
            return Result.fail("You are not part of this challenge.", code=error_codes.UNAUTHORIZED)
        if bet.challenge_status == ChallengeStatus.DECLINED:
            return Result.fail("This challenge was declined.", code=error_codes.BET_CLOSED)

    if bet.has_pick(user_id):
        return Result.fail("You have already made a pick on this bet.", code=error_codes.DUPLICATE_PICK)
    return Result.ok()


def validate_bet_judging(bet: Bet, judged_by: int, now: int) -> Result[None]:
    """
    Check permissions and state before judging.

    Order: creator, terminal state, closing time, challenge acceptance.
    """
    if judged_by != bet.creator_id:
        return Result.fail("Only the bet creator can judge this bet.", code=error_codes.UNAUTHORIZED)

    if bet.status == BetStatus.JUDGED:
        return Result.fail("This bet has already been judged.", code=error_codes.ALREADY_SETTLED)
    if bet.status == BetStatus.VOID:
        return Result.fail("This bet has been voided.", code=error_codes.ALREADY_SETTLED)

    if now < bet.closes_at:
        return Result.fail("Bet must be closed before judging.", code=error_codes.NOT_YET_CLOSED)

    if bet.mode == BetMode.HEAD_TO_HEAD and bet.challenge_status != ChallengeStatus.ACCEPTED:
        return Result.fail(
            "The challenge has not been accepted.",
            code=error_codes.CHALLENGE_NOT_ACCEPTED,
        )
    return Result.ok()
