"""
Failure description — structured error information for the failure track.

Every failure carries an ErrorCode from the trust-list error taxonomy, a
human-readable message, the optional exception that caused it, and an
optional tuple of itemized details (one line per field-level problem).
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique


@unique
class ErrorCode(Enum):
    """
    Error taxonomy of the trust-list tooling.

    Every code is fatal to the command that produced it: there is no
    partial-success mode and no retry.
    """

    # --- Certificate input ---
    MALFORMED_IDENTIFIER = "MALFORMED_IDENTIFIER"
    """Subject Key Identifier is not an even-length hex string."""

    UNPARSABLE_CERTIFICATE = "UNPARSABLE_CERTIFICATE"
    """Bytes are neither a PEM nor a DER encoded X.509 certificate."""

    MISSING_SUBJECT_KEY_IDENTIFIER = "MISSING_SUBJECT_KEY_IDENTIFIER"
    """Certificate has no Subject Key Identifier extension."""

    UNSUPPORTED_FILE_FORMAT = "UNSUPPORTED_FILE_FORMAT"
    """File is not PEM and its extension does not mark a binary certificate."""

    # --- Registry ---
    REGISTRY_READ_ERROR = "REGISTRY_READ_ERROR"
    """Registry file missing, unreadable, not JSON, or not shaped like a trust list."""

    REGISTRY_WRITE_ERROR = "REGISTRY_WRITE_ERROR"
    """Registry could not be serialized, verified, or written."""

    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    """Document does not conform to the trust-list JSON Schema."""

    # --- Runtime ---
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Invalid command-line settings."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception,
    itemized details and timestamp.

    >>> desc = FailureDescription(ErrorCode.MALFORMED_IDENTIFIER, "odd length")
    >>> desc.code
    <ErrorCode.MALFORMED_IDENTIFIER: 'MALFORMED_IDENTIFIER'>
    >>> desc.details
    ()
    """

    code: ErrorCode
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    details: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain, if any."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(
                type(self.exception), self.exception, self.exception.__traceback__
            )
        )
        return f"{self.message}\n{tb}"
