"""
Merge engine — idempotent, rotation-aware upsert of one certificate.

Domain layer: no I/O. The only collaborator is the CertificateParser port,
used to read the SKI of certificates already stored in an entry.

Given the new certificate's metadata:
  1. issuer_id = derive_issuer_id(ski)
  2. unknown issuer_id        → append a new entry              → ADDED
  3. known issuer_id, scan its records in order:
       identical PEM text     → nothing to do, stop             → ALREADY_EXISTS
       same SKI, other bytes  → replace PEM at that position    → CERTIFICATE_UPDATED
       SKI unreadable         → failure (fail fast)
  4. no match                 → append the record to the entry  → CERTIFICATE_ADDED
  5. the entry's name always becomes the new certificate's subject name
"""

from __future__ import annotations

from dataclasses import replace

import structlog
from railway.result import Result

from trust_list.domain.identity import derive_issuer_id
from trust_list.domain.models import (
    DEFAULT_ENTITY_TYPE,
    CertificateMetadata,
    CertificateRecord,
    MergeOutcome,
    MergeStatus,
    TrustListEntry,
)
from trust_list.domain.ports import CertificateParser

log = structlog.get_logger()


def build_entry(
    metadata: CertificateMetadata,
    issuer_id: str,
    entity_type: str = DEFAULT_ENTITY_TYPE,
    source: str = "",
) -> TrustListEntry:
    """Create a single-certificate entry for a previously unseen issuer."""
    return TrustListEntry(
        issuer_id=issuer_id,
        name=metadata.subject.display_name,
        entity_type=entity_type,
        certificates=(CertificateRecord(certificate=metadata.pem_content, source=source),),
    )


def create_entry(
    metadata: CertificateMetadata,
    entity_type: str = DEFAULT_ENTITY_TYPE,
    source: str = "",
) -> Result[TrustListEntry]:
    """Derive the issuer_id and build the registry fragment for one certificate."""
    return derive_issuer_id(metadata.ski).map(
        lambda issuer_id: build_entry(metadata, issuer_id, entity_type, source)
    )


def _find_entry(entries: tuple[TrustListEntry, ...], issuer_id: str) -> int | None:
    for index, entry in enumerate(entries):
        if entry.issuer_id == issuer_id:
            return index
    return None


def _merge_into_entry(
    entry: TrustListEntry,
    metadata: CertificateMetadata,
    parser: CertificateParser,
    source: str,
) -> Result[tuple[MergeStatus, TrustListEntry]]:
    """Apply steps 3 to 5 to an existing entry."""
    certificates = list(entry.certificates)
    status = MergeStatus.CERTIFICATE_ADDED

    for position, existing in enumerate(certificates):
        if existing.certificate == metadata.pem_content:
            status = MergeStatus.ALREADY_EXISTS
            break

        existing_meta = parser.parse(existing.certificate.encode("utf-8"))
        if existing_meta.is_failure():
            error = existing_meta.error()
            return Result.failure(
                error.code,
                f"Cannot read Subject Key Identifier of certificate {position + 1} "
                f"of {entry.issuer_id}: {error.message}",
                error.exception,
            )

        if existing_meta.value().ski == metadata.ski:
            certificates[position] = replace(existing, certificate=metadata.pem_content)
            status = MergeStatus.CERTIFICATE_UPDATED
            break
    else:
        certificates.append(CertificateRecord(certificate=metadata.pem_content, source=source))

    merged = replace(
        entry,
        name=metadata.subject.display_name,
        certificates=tuple(certificates),
    )
    return Result.success((status, merged))


def merge_certificate(
    entries: tuple[TrustListEntry, ...],
    metadata: CertificateMetadata,
    parser: CertificateParser,
    entity_type: str = DEFAULT_ENTITY_TYPE,
    source: str = "",
) -> Result[MergeOutcome]:
    """
    Merge one certificate into the registry.

    Returns the status and the complete resulting registry; the input tuple is
    never modified. Persisting the result is the caller's job.
    """
    return derive_issuer_id(metadata.ski).flat_map(
        lambda issuer_id: _merge(entries, metadata, parser, issuer_id, entity_type, source)
    )


def _merge(
    entries: tuple[TrustListEntry, ...],
    metadata: CertificateMetadata,
    parser: CertificateParser,
    issuer_id: str,
    entity_type: str,
    source: str,
) -> Result[MergeOutcome]:
    index = _find_entry(entries, issuer_id)
    if index is None:
        new_entry = build_entry(metadata, issuer_id, entity_type, source)
        log.info("merge.entry_added", issuer_id=issuer_id, name=new_entry.name)
        return Result.success(
            MergeOutcome(MergeStatus.ADDED, issuer_id, (*entries, new_entry))
        )

    def _rebuild(merged: tuple[MergeStatus, TrustListEntry]) -> MergeOutcome:
        status, entry = merged
        log.info(
            f"merge.{status.value}",
            issuer_id=issuer_id,
            name=entry.name,
            certificates=len(entry.certificates),
        )
        updated = (*entries[:index], entry, *entries[index + 1 :])
        return MergeOutcome(status, issuer_id, updated)

    return _merge_into_entry(entries[index], metadata, parser, source).map(_rebuild)
