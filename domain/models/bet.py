"""
Bet domain model.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum


class WagerType(Enum):
    """What participants are predicting."""

    YES_NO = "YES_NO"
    OVER_UNDER = "OVER_UNDER"
    CLOSEST_GUESS = "CLOSEST_GUESS"


class BetMode(Enum):
    """Many-party group wager or two-party challenge."""

    GROUP = "GROUP"
    HEAD_TO_HEAD = "HEAD_TO_HEAD"


class BetStatus(Enum):
    """
    Persisted lifecycle status.

    CLOSED is never written for every bet; use Bet.is_closed() instead of
    comparing against it.
    """

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    JUDGED = "JUDGED"
    VOID = "VOID"


class ChallengeStatus(Enum):
    """Acceptance sub-state of a head-to-head challenge."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


TERMINAL_STATUSES = frozenset({BetStatus.JUDGED, BetStatus.VOID})

# Pick tokens per enum wager type
PICK_TOKENS: dict[WagerType, frozenset[str]] = {
    WagerType.YES_NO: frozenset({"YES", "NO"}),
    WagerType.OVER_UNDER: frozenset({"OVER", "UNDER"}),
}

PickValue = str | Decimal


# Accepted numeric range: below 10**13, at most 12 decimal places
MAX_NUMBER_MAGNITUDE = 12
MAX_NUMBER_PLACES = 12
_SMALLEST_STEP = Decimal(1).scaleb(-MAX_NUMBER_PLACES)


def parse_number(value) -> Decimal:
    """
    Parse a finite real number from an int, float, Decimal or numeric string.

    Floats go through str() so 48.1 becomes Decimal("48.1") rather than its
    binary expansion; distances compared later stay exact.

    Raises:
        ValueError: If the value is not a finite number or is out of range.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Not a finite number: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"Not a number: {value!r}") from None
    if not number.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    if not number:
        return Decimal(0)
    if number.adjusted() > MAX_NUMBER_MAGNITUDE:
        raise ValueError(f"Number out of range: {value!r}")
    if number.as_tuple().exponent < -MAX_NUMBER_PLACES and number != number.quantize(_SMALLEST_STEP):
        raise ValueError(f"Too many decimal places: {value!r}")
    return number


def parse_pick_value(wager_type: WagerType, value) -> PickValue:
    """
    Normalize a pick into the wager type's domain.

    YES_NO/OVER_UNDER picks are case-insensitive tokens; CLOSEST_GUESS picks
    are numbers.

    Raises:
        ValueError: If the value is outside the domain.
    """
    if wager_type == WagerType.CLOSEST_GUESS:
        return parse_number(value)
    if not isinstance(value, str):
        raise ValueError(f"Pick must be one of {sorted(PICK_TOKENS[wager_type])}")
    token = value.strip().upper()
    if token not in PICK_TOKENS[wager_type]:
        raise ValueError(f"Pick must be one of {sorted(PICK_TOKENS[wager_type])}")
    return token


def format_value(value: PickValue) -> str:
    """Serialize a pick or outcome for storage."""
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return value


def load_value(wager_type: WagerType, raw: str) -> PickValue:
    """Inverse of format_value for a stored pick."""
    if wager_type == WagerType.CLOSEST_GUESS:
        return Decimal(raw)
    return raw


def load_outcome(wager_type: WagerType, raw: str) -> PickValue:
    """Inverse of format_value for a stored outcome (numeric unless YES_NO)."""
    if wager_type == WagerType.YES_NO:
        return raw
    return Decimal(raw)


@dataclass(frozen=True)
class OddsRatio:
    """
    Stake shares for an asymmetric head-to-head wager.

    Each side stakes wager_amount * its share; the favored side stakes more
    to win less.
    """

    challenger_share: int = 1
    challengee_share: int = 1

    def __post_init__(self):
        for share in (self.challenger_share, self.challengee_share):
            if isinstance(share, bool) or not isinstance(share, int):
                raise ValueError("Odds shares must be whole numbers.")
        if self.challenger_share <= 0 or self.challengee_share <= 0:
            raise ValueError("Odds shares must be positive.")


@dataclass
class Bet:
    """Represents one wager and its settlement results."""

    bet_id: int
    mode: BetMode
    wager_type: WagerType
    title: str
    creator_id: int
    wager_amount: int  # cents per participant (GROUP) or per odds share (HEAD_TO_HEAD)
    created_at: int
    closes_at: int
    status: BetStatus = BetStatus.OPEN
    description: str = ""
    group_id: int | None = None
    line: Decimal | None = None
    participants: set[int] = field(default_factory=set)
    picks: dict[int, PickValue] = field(default_factory=dict)
    # Head-to-head
    challenger_id: int | None = None
    challengee_id: int | None = None
    challenge_status: ChallengeStatus | None = None
    odds: OddsRatio | None = None
    # Settlement results
    judged_at: int | None = None
    outcome_value: PickValue | None = None
    winners: list[int] = field(default_factory=list)
    payout_per_winner: int = 0
    void_reason: str | None = None
    winner_id: int | None = None
    loser_id: int | None = None
    winner_payout: int | None = None

    @property
    def is_head_to_head(self) -> bool:
        return self.mode == BetMode.HEAD_TO_HEAD

    @property
    def is_settled(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def is_closed(self, now: int) -> bool:
        """Closed once the deadline passes or the bet leaves OPEN."""
        return now >= self.closes_at or self.status != BetStatus.OPEN

    def has_pick(self, user_id: int) -> bool:
        return user_id in self.picks

    def stake_for(self, user_id: int) -> int:
        """Amount a participant has at risk on this bet."""
        if not self.is_head_to_head:
            return self.wager_amount
        odds = self.odds or OddsRatio()
        if user_id == self.challenger_id:
            return self.wager_amount * odds.challenger_share
        if user_id == self.challengee_id:
            return self.wager_amount * odds.challengee_share
        return 0
