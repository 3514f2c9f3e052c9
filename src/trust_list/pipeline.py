"""
Pipelines — one railway per CLI command.

All I/O is injected via ports; each stage returns Result and a failure
short-circuits the rest of the chain.

  add:        parse_file → load registry → merge → save → MergeOutcome
  entry:      parse_file → derive issuer_id → (metadata, TrustListEntry)
  expiration: load registry → evaluate → ExpirationReport
  validation: load raw document → schema → number of entries
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from railway import ErrorCode
from railway.result import Result

from trust_list.domain.expiration import DEFAULT_WARNING_MONTHS, evaluate_expirations
from trust_list.domain.merge import create_entry, merge_certificate
from trust_list.domain.models import (
    DEFAULT_ENTITY_TYPE,
    CertificateMetadata,
    ExpirationReport,
    MergeOutcome,
    TrustListEntry,
)
from trust_list.domain.ports import CertificateParser, SchemaValidator, TrustListRepository


def add_certificate(
    metadata: CertificateMetadata,
    parser: CertificateParser,
    repository: TrustListRepository,
    entity_type: str = DEFAULT_ENTITY_TYPE,
    source: str = "",
) -> Result[MergeOutcome]:
    """
    Merge one parsed certificate into the registry and persist it.

    The registry is rewritten even for ALREADY_EXISTS, because the issuer
    name is refreshed on every merge.
    """
    return (
        repository.load()
        .flat_map(lambda entries: merge_certificate(entries, metadata, parser, entity_type, source))
        .flat_map(lambda outcome: repository.save(outcome.entries).map(lambda _size: outcome))
    )


def run_add_certificate(
    certificate_path: Path,
    parser: CertificateParser,
    repository: TrustListRepository,
    entity_type: str = DEFAULT_ENTITY_TYPE,
    source: str = "",
) -> Result[MergeOutcome]:
    return parser.parse_file(certificate_path).flat_map(
        lambda metadata: add_certificate(metadata, parser, repository, entity_type, source)
    )


def run_create_entry(
    certificate_path: Path,
    parser: CertificateParser,
    entity_type: str = DEFAULT_ENTITY_TYPE,
    source: str = "",
) -> Result[tuple[CertificateMetadata, TrustListEntry]]:
    """Build the registry fragment for one certificate file without touching the registry."""
    return parser.parse_file(certificate_path).flat_map(
        lambda metadata: create_entry(metadata, entity_type, source).map(
            lambda entry: (metadata, entry)
        )
    )


def run_expiration_check(
    repository: TrustListRepository,
    parser: CertificateParser,
    now: datetime,
    warning_months: int = DEFAULT_WARNING_MONTHS,
) -> Result[ExpirationReport]:
    return repository.load().flat_map(
        lambda entries: evaluate_expirations(entries, parser, now, warning_months)
    )


def run_validation(
    repository: TrustListRepository,
    validator: SchemaValidator,
) -> Result[int]:
    """Validate the registry document as stored; returns the number of entries."""

    def _check(document: object) -> Result[int]:
        violations = validator.validate(document)
        if violations:
            return Result.failure(
                ErrorCode.SCHEMA_VALIDATION_ERROR,
                "Trust list validation failed",
                details=[str(v) for v in violations],
            )
        return Result.success(len(document) if isinstance(document, list) else 0)

    return repository.load_document().flat_map(_check)
