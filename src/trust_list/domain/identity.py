"""
Issuer identity — derive the stable `issuer_id` from a Subject Key Identifier.

    "AA:BB:CC:DD" → bytes aa bb cc dd → base64url, no padding → "x509_aki:qrvM3Q"
"""

from __future__ import annotations

import base64
import re

from railway import ErrorCode
from railway.result import Result

ISSUER_ID_PREFIX = "x509_aki:"

_HEX = re.compile(r"[0-9A-Fa-f]+")


def derive_issuer_id(ski: str) -> Result[str]:
    """
    Map a colon-separated hex SKI to `x509_aki:<url-safe-base64>`.

    Case-insensitive on input. Fails with MALFORMED_IDENTIFIER when the hex
    is empty, has odd length, or contains non-hex characters.
    """
    hex_digits = ski.strip().replace(":", "")
    if not _HEX.fullmatch(hex_digits):
        return Result.failure(
            ErrorCode.MALFORMED_IDENTIFIER,
            f"Subject Key Identifier is not a hex string: {ski!r}",
        )
    if len(hex_digits) % 2:
        return Result.failure(
            ErrorCode.MALFORMED_IDENTIFIER,
            f"Subject Key Identifier has an odd number of hex digits: {ski!r}",
        )
    encoded = base64.urlsafe_b64encode(bytes.fromhex(hex_digits)).rstrip(b"=")
    return Result.success(ISSUER_ID_PREFIX + encoded.decode("ascii"))


def format_ski(digest: bytes) -> str:
    """Render raw SKI bytes the way X.509 tooling prints them: 'A1:B2:...'."""
    return ":".join(f"{byte:02X}" for byte in digest)
