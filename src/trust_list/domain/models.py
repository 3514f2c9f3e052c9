"""
Domain models — immutable data structures for the trust list and its reports.

A trust list is an ordered sequence of TrustListEntry (one per issuer), each
holding an ordered sequence of CertificateRecord. Order is insertion order and
is the only meaningful order: nothing here ever sorts.

All models are frozen dataclasses. "Mutating" a record means building a new
one with dataclasses.replace() and putting it back at the same position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, unique
from typing import Any

DEFAULT_ENTITY_TYPE = "government"
CERTIFICATE_FORMAT_PEM = "pem"
ALLOW_EXPIRED_KEY = "allowExpired"
LEGACY_ALLOW_EXPIRED_KEY = "allow_expired"


@dataclass(frozen=True, slots=True)
class CertificateRecord:
    """
    One trusted certificate inside an issuer entry.

    `certificate` holds normalized PEM text. `allow_expired` is None when the
    flag is absent from the document, which keeps it absent on rewrite. The
    flag is stored as "allowExpired"; `allow_expired_key` remembers when a
    document used the older "allow_expired" spelling so it is written back as-is.
    `extra` carries unknown JSON keys so a rewrite never drops them.
    """

    certificate: str = field(repr=False)
    certificate_format: str = CERTIFICATE_FORMAT_PEM
    source: str = ""
    allow_expired: bool | None = None
    allow_expired_key: str = field(default=ALLOW_EXPIRED_KEY, compare=False, repr=False)
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def exempt_from_expiration(self) -> bool:
        return bool(self.allow_expired)


@dataclass(frozen=True, slots=True)
class TrustListEntry:
    """
    One trusted issuer, keyed by `issuer_id` (x509_aki:<url-safe-base64 SKI>).

    `issuer_id` is never recomputed once the entry exists; `name` is
    overwritten on every merge.
    """

    issuer_id: str
    name: str
    entity_type: str = DEFAULT_ENTITY_TYPE
    certificates: tuple[CertificateRecord, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class SubjectFields:
    """Best-effort subject DN attributes; any attribute not present stays None."""

    country: str | None = None
    organization: str | None = None
    common_name: str | None = None

    @property
    def display_name(self) -> str:
        """Organization, falling back to Common Name, falling back to ''."""
        return self.organization or self.common_name or ""


@dataclass(frozen=True, slots=True)
class CertificateMetadata:
    """
    Normalized result of parsing one certificate.

    `ski` is uppercase colon-separated hex ("A1:B2:..."); `pem_content` is the
    PEM text that gets stored in the registry.
    """

    ski: str
    subject: SubjectFields
    pem_content: str = field(repr=False)
    not_before: datetime
    not_after: datetime
    subject_dn: str = ""
    issuer_dn: str = ""
    serial_number: str = ""
    sha256_fingerprint: str = ""


@unique
class MergeStatus(Enum):
    """What a merge did to the registry."""

    ADDED = "added"
    CERTIFICATE_ADDED = "certificate_added"
    CERTIFICATE_UPDATED = "certificate_updated"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    """Status of a merge plus the full resulting registry."""

    status: MergeStatus
    issuer_id: str
    entries: tuple[TrustListEntry, ...] = field(repr=False)


@unique
class ExpirationStatus(Enum):
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    VALID = "valid"


@dataclass(frozen=True, slots=True)
class ExpirationFinding:
    """
    One expired or soon-to-expire certificate.

    Positions are 1-based, as shown to humans.
    """

    status: ExpirationStatus
    issuer_name: str
    issuer_position: int
    certificate_position: int
    not_after: datetime
    days_until_expiration: int


@dataclass(frozen=True, slots=True)
class ExpirationReport:
    """Ordered findings of one expiration pass over the registry."""

    expired: tuple[ExpirationFinding, ...] = ()
    expiring_soon: tuple[ExpirationFinding, ...] = ()
    evaluated: int = 0

    @property
    def has_findings(self) -> bool:
        return bool(self.expired or self.expiring_soon)


@dataclass(frozen=True, slots=True)
class SchemaViolation:
    """A single schema error: JSON pointer into the document ('/' for the root) and message."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"
