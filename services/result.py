"""
Result type for pre-flight validation.

Validation helpers return a Result[T] instead of raising, so a caller can
inspect the failure (and its error code) before deciding what to do. The
services turn a failed Result into the matching typed exception with
raise_for_failure().

Usage:
    # Returning success
    return Result.ok(parsed_value)

    # Returning failure
    return Result.fail("Pick must be a number", code=error_codes.INVALID_VALUE)

    # Checking results
    result = validate_pick_value(bet, value)
    if not result:
        print(f"Error ({result.error_code}): {result.error}")
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from services.errors import error_for_code

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    A simple result type for validation return values.

    Attributes:
        success: Whether the check passed
        value: The checked/normalized value if successful
        error: Error message if failed
        error_code: Error code from services.error_codes if failed
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        """Create a successful result with an optional value."""
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        """Create a failed result with an error message and optional error code."""
        return cls(success=False, error=error, error_code=code)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """
        Get the value, raising the typed BetError for the error code on failure.

        This is how services propagate a failed check to their callers.
        """
        self.raise_for_failure()
        return self.value  # type: ignore

    def raise_for_failure(self) -> None:
        if not self.success:
            raise error_for_code(self.error_code)(self.error, code=self.error_code)

    def unwrap_or(self, default: T) -> T:
        """Get the value or a default if the result is a failure."""
        return self.value if self.success else default  # type: ignore

    def map(self, fn: Callable[[T], "Result"]) -> "Result":
        """Chain checks: apply fn to the value of a success, pass failures through."""
        if not self.success:
            return self
        return fn(self.value)
