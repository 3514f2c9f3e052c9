"""
Test assertions for Result values.

    from railway import ErrorCode, ResultAssertions

    def test_odd_length_ski_is_rejected():
        result = derive_issuer_id("ABC")
        ResultAssertions.assert_failure(result, ErrorCode.MALFORMED_IDENTIFIER)
"""

from __future__ import annotations

from typing import TypeVar

from railway.failure import ErrorCode, FailureDescription
from railway.result import Failure, Result, Success

T = TypeVar("T")


def _describe(result: Result[T]) -> str:
    match result:
        case Success(value):
            return f"Success({value!r})"
        case Failure(error):
            return f"Failure({error.code.value}: {error.message!r})"
    return repr(result)


class ResultAssertions:
    """Assertion helpers that unwrap a Result or explain why they could not."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Return the success value; fail the test with the failure's code and message otherwise."""
        if not isinstance(result, Success):
            raise AssertionError(f"Expected Success, got {_describe(result)} {message}".rstrip())
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_code: ErrorCode | None = None,
        message: str = "",
    ) -> FailureDescription:
        """Return the failure description, optionally requiring a specific code."""
        if not isinstance(result, Failure):
            raise AssertionError(f"Expected Failure, got {_describe(result)} {message}".rstrip())
        error = result.error()
        if expected_code is not None and error.code is not expected_code:
            raise AssertionError(
                f"Expected {expected_code.value}, got {_describe(result)} {message}".rstrip()
            )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[T], substring: str) -> None:
        """Case-insensitive substring check on the failure message."""
        error = ResultAssertions.assert_failure(result)
        if substring.lower() not in error.message.lower():
            raise AssertionError(f"{substring!r} not found in failure message {error.message!r}")

    @staticmethod
    def assert_failure_details(result: Result[T], *expected: str) -> tuple[str, ...]:
        """Require the itemized details to be exactly `expected`, in order."""
        details = ResultAssertions.assert_failure(result).details
        if details != expected:
            raise AssertionError(f"Expected details {expected!r}, got {details!r}")
        return details
