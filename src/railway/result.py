"""
Result — the two-track value every trust-list stage returns.

A Result[T] is either Success(value) or Failure(FailureDescription). Stages
are chained with flat_map; once a stage fails, the remaining stages are
skipped and the failure travels to the end of the chain unchanged.

    parse_file ──Success──> load ──Success──> merge ──Success──> save ──> Result[T]
        │                    │                  │                  │
        └──Failure───────────┴──────────────────┴──────────────────┴──> Result[T]

The track-specific behaviour lives on the two subclasses; Result itself only
holds the factories and the shared signatures.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from railway.failure import ErrorCode, FailureDescription

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class Result(Generic[T]):
    """
    Two-track result: Success(value) or Failure(FailureDescription).

        >>> Result.success(21).map(lambda x: x * 2).value()
        42
        >>> Result.failure(ErrorCode.REGISTRY_READ_ERROR, "missing").is_failure()
        True
    """

    __slots__ = ()

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def value(self) -> T:
        """The success value; raises ValueError on a Failure."""
        raise NotImplementedError

    def error(self) -> FailureDescription:
        """The failure description; raises ValueError on a Success."""
        raise NotImplementedError

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        """Collapse both tracks into one value (the CLI turns it into an exit code)."""
        raise NotImplementedError

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        raise NotImplementedError

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        raise NotImplementedError

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        """Run a side effect (logging, printing) on the success value."""
        raise NotImplementedError

    # ──────────────────────── Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Result[T]:
        return Success(value)

    @staticmethod
    def failure(
        code: ErrorCode,
        message: str,
        exception: BaseException | None = None,
        details: Iterable[str] = (),
    ) -> Result[T]:
        """
        Create a failed Result.

            Result.failure(ErrorCode.REGISTRY_READ_ERROR, "trust-list.json not found")
            Result.failure(ErrorCode.SCHEMA_VALIDATION_ERROR, "invalid", details=errors)
        """
        return Failure(FailureDescription(code, message, exception, tuple(details)))

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        error_code: ErrorCode,
        error_message: str,
    ) -> Result[T]:
        """
        Run a computation that may raise; exceptions land on the failure track.

        The exception text is appended to `error_message` so the CLI can show
        the root cause without a traceback.
        """
        try:
            return Success(computation())
        except Exception as e:
            return Result.failure(error_code, f"{error_message}: {e}", e)


@dataclass(frozen=True, slots=True, eq=True, repr=False)
class Success(Result[T]):
    """The success track: wraps a non-None value."""

    _value: T

    def __post_init__(self) -> None:
        if self._value is None:
            raise TypeError("Success value must not be None")

    def value(self) -> T:
        return self._value

    def error(self) -> FailureDescription:
        raise ValueError(f"Cannot get error from a Success: {self._value!r}")

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        return on_success(self._value)

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        return Success(mapper(self._value))

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        return mapper(self._value)

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        action(self._value)
        return self

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class Failure(Result[T]):
    """The failure track: wraps a FailureDescription. Equal when code and message match."""

    _error: FailureDescription

    def value(self) -> T:
        raise ValueError(f"Cannot get value from a Failure: {self._error.message}")

    def error(self) -> FailureDescription:
        return self._error

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[FailureDescription], R],
    ) -> R:
        return on_failure(self._error)

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        return self

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        return self

    def peek(self, action: Callable[[T], Any]) -> Result[T]:
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Failure):
            return NotImplemented
        return (self._error.code, self._error.message) == (other._error.code, other._error.message)

    def __hash__(self) -> int:
        return hash((self._error.code, self._error.message))

    def __repr__(self) -> str:
        return f"Failure({self._error.code.value}: {self._error.message!r})"
