"""
Railway-Oriented Programming (ROP) helpers used by the trust-list tooling.

Explicit, composable error handling — stages return Result, never raise.

    from railway import Result, ErrorCode

    def require_ski(ski: str | None) -> Result[str]:
        if ski is None:
            return Result.failure(ErrorCode.MISSING_SUBJECT_KEY_IDENTIFIER, "no SKI")
        return Result.success(ski)
"""

from railway.assertions import ResultAssertions
from railway.failure import ErrorCode, FailureDescription
from railway.result import Failure, Result, Success

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultAssertions",
]
