"""Result type for explicit error handling.

Services return ``Ok(value)`` or ``Err(error)`` instead of raising, so the
CLI decides how each failure is rendered and which exit code it maps to.

Usage:
    def parse_track(raw: str) -> Result[Track, str]:
        track = Track.parse(raw)
        if track is None:
            return Err(f"invalid track: {raw}")
        return Ok(track)

    match parse_track("alpha"):
        case Ok(track):
            print(track)
        case Err(error):
            print(error)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeGuard, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying ``value``.

    Attributes:
        value: What the operation produced.
    """

    value: T

    def is_ok(self) -> bool:
        """Returns True."""
        return True

    def is_err(self) -> bool:
        """Returns False."""
        return False

    def unwrap(self) -> T:
        """Returns the contained value.

        Returns:
            The value this Ok was built with.
        """
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Returns the contained value and ignores ``default``.

        Args:
            default: Only used by Err.

        Returns:
            The contained value.
        """
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Applies ``f`` to the contained value.

        Args:
            f: Transformation of the value.

        Returns:
            Ok wrapping ``f(value)``.
        """
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chains a step that itself returns a Result.

        Args:
            f: Next step, given the contained value.

        Returns:
            Whatever ``f`` returns.
        """
        return f(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result carrying ``error``.

    Attributes:
        error: Why the operation failed, usually a frozen error dataclass.
    """

    error: E

    def is_ok(self) -> bool:
        """Returns False."""
        return False

    def is_err(self) -> bool:
        """Returns True."""
        return True

    def unwrap(self) -> None:
        """Raises ValueError: an Err has no value.

        Raises:
            ValueError: Always, with the error in the message.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Returns ``default``.

        Args:
            default: Value to use in place of the missing one.

        Returns:
            ``default``.
        """
        return default

    def map(self, f: Callable[[T], U]) -> Err[E]:
        """Returns self unchanged (there is no value to map).

        Args:
            f: Ignored.

        Returns:
            This Err.
        """
        return self

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Err[E]:
        """Returns self unchanged; the next step is skipped.

        Args:
            f: Ignored.

        Returns:
            This Err.
        """
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]


def is_ok(result: Result[T, E]) -> TypeGuard[Ok[T]]:
    """Type guard that narrows ``result`` to Ok.

    Args:
        result: The Result to check.

    Returns:
        True if ``result`` is Ok.

    Example:
        if is_ok(result):
            edit_id = result.value
    """
    return isinstance(result, Ok)


def is_err(result: Result[T, E]) -> TypeGuard[Err[E]]:
    """Type guard that narrows ``result`` to Err.

    Args:
        result: The Result to check.

    Returns:
        True if ``result`` is Err.

    Example:
        if is_err(result):
            console.error(result.error.message)
    """
    return isinstance(result, Err)
