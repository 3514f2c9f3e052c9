"""
Expiration policy — classify every trusted certificate against "now".

Domain layer: read-only over the registry. Certificates are parsed through the
CertificateParser port; one unreadable certificate aborts the whole pass,
since a corrupted registry entry must never be silently skipped.

Policy (warning horizon = N calendar months, default 1):
  not_after <= now                  → EXPIRED
  now < not_after <= now + horizon  → EXPIRING_SOON
  otherwise                         → VALID
Records flagged `allowExpired` (or the older `allow_expired`) are not evaluated at all.
"""

from __future__ import annotations

import calendar
import math
from datetime import datetime, timedelta

import structlog
from railway.result import Result

from trust_list.domain.models import (
    ExpirationFinding,
    ExpirationReport,
    ExpirationStatus,
    TrustListEntry,
)
from trust_list.domain.ports import CertificateParser

log = structlog.get_logger()

DEFAULT_WARNING_MONTHS = 1

_ONE_DAY = timedelta(days=1)


def add_months(moment: datetime, months: int) -> datetime:
    """
    Calendar-month arithmetic; the day is clamped to the target month's length.

    Jan 31 + 1 month → Feb 28 (or 29).
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def classify(not_after: datetime, now: datetime, horizon_end: datetime) -> ExpirationStatus:
    if not_after <= now:
        return ExpirationStatus.EXPIRED
    if not_after <= horizon_end:
        return ExpirationStatus.EXPIRING_SOON
    return ExpirationStatus.VALID


def days_until(not_after: datetime, now: datetime) -> int:
    """ceil((not_after - now) / 1 day); zero or negative once expired."""
    return math.ceil((not_after - now) / _ONE_DAY)


def evaluate_expirations(
    entries: tuple[TrustListEntry, ...],
    parser: CertificateParser,
    now: datetime,
    warning_months: int = DEFAULT_WARNING_MONTHS,
) -> Result[ExpirationReport]:
    """
    Evaluate every non-exempt certificate of the registry.

    `now` must be timezone-aware (certificate dates are UTC). Findings keep
    registry order: issuers in list order, certificates in entry order.
    """
    horizon_end = add_months(now, warning_months)
    expired: list[ExpirationFinding] = []
    expiring_soon: list[ExpirationFinding] = []
    evaluated = 0

    for issuer_position, entry in enumerate(entries, start=1):
        for certificate_position, record in enumerate(entry.certificates, start=1):
            if record.exempt_from_expiration:
                continue

            parsed = parser.parse(record.certificate.encode("utf-8"))
            if parsed.is_failure():
                error = parsed.error()
                log.error(
                    "expiration.unreadable_certificate",
                    issuer=entry.name,
                    issuer_position=issuer_position,
                    certificate_position=certificate_position,
                )
                return Result.failure(
                    error.code,
                    f"Issuer {issuer_position} ({entry.name}): certificate "
                    f"{certificate_position} could not be checked: {error.message}",
                    error.exception,
                )

            not_after = parsed.value().not_after
            evaluated += 1
            status = classify(not_after, now, horizon_end)
            if status is ExpirationStatus.VALID:
                continue

            finding = ExpirationFinding(
                status=status,
                issuer_name=entry.name,
                issuer_position=issuer_position,
                certificate_position=certificate_position,
                not_after=not_after,
                days_until_expiration=days_until(not_after, now),
            )
            (expired if status is ExpirationStatus.EXPIRED else expiring_soon).append(finding)

    log.info(
        "expiration.evaluated",
        certificates=evaluated,
        expired=len(expired),
        expiring_soon=len(expiring_soon),
    )
    return Result.success(
        ExpirationReport(
            expired=tuple(expired),
            expiring_soon=tuple(expiring_soon),
            evaluated=evaluated,
        )
    )
