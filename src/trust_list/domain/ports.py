"""
Ports — Protocol-based interfaces for the infrastructure the engine needs.

  Domain ← Ports (protocols) ← Adapters (implementations)

Adapters satisfy a port simply by implementing its methods. The pure domain
functions (merge, expiration) only ever see these protocols, so tests drive
them with fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from railway.result import Result

from trust_list.domain.models import CertificateMetadata, SchemaViolation, TrustListEntry


@runtime_checkable
class CertificateParser(Protocol):
    """
    Port: turn certificate bytes into CertificateMetadata.

    `filename` is a hint only: its extension decides whether non-PEM bytes
    may be decoded as DER.
    """

    def parse(self, data: bytes, filename: str | None = None) -> Result[CertificateMetadata]: ...

    def parse_file(self, path: Path) -> Result[CertificateMetadata]: ...


@runtime_checkable
class SchemaValidator(Protocol):
    """Port: validate a decoded JSON document, returning every violation found."""

    def validate(self, document: Any) -> list[SchemaViolation]: ...


@runtime_checkable
class TrustListRepository(Protocol):
    """
    Port: load and persist the whole registry.

    Every save is a full rewrite of the registry: serialize, verify the
    round trip, gate on the schema, then replace the file.
    """

    def load_document(self) -> Result[Any]:
        """Read and JSON-decode the registry without interpreting it."""
        ...

    def load(self) -> Result[tuple[TrustListEntry, ...]]: ...

    def save(self, entries: tuple[TrustListEntry, ...]) -> Result[int]:
        """Persist all entries; returns the number of bytes written."""
        ...
