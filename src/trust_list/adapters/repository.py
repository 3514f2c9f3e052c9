"""
JSON file repository adapter — the trust-list file as the single source of truth.

Adapter layer — implements the TrustListRepository port.

Every save is a full read-modify-write of one file:
  1. encode entries → canonical text (serializer)
  2. re-parse the text; it must reproduce the encoded document exactly
  3. validate the document against the JSON Schema
  4. write a sibling temp file, then os.replace() it over the registry
The temp file never outlives a failed write. Steps 2 and 3 run before any
byte touches the disk, so a rejected registry leaves the old file intact.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import structlog
from railway import ErrorCode
from railway.result import Result

from trust_list.adapters import serializer
from trust_list.domain.models import TrustListEntry
from trust_list.domain.ports import SchemaValidator

log = structlog.get_logger()


def _atomic_write(path: Path, text: str) -> int:
    """Write `text` to `path` via a temp file in the same directory."""
    payload = text.encode("utf-8")
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return len(payload)


class JsonFileTrustListRepository:
    """
    Load and persist the trust list as canonical JSON.

    Implements the TrustListRepository port. The schema validator is passed
    in by the composition root and gates every write.
    """

    def __init__(self, path: Path, validator: SchemaValidator) -> None:
        self._path = Path(path)
        self._validator = validator

    @property
    def path(self) -> Path:
        return self._path

    def load_document(self) -> Result[Any]:
        return Result.from_computation(
            lambda: serializer.loads(self._path.read_text(encoding="utf-8")),
            ErrorCode.REGISTRY_READ_ERROR,
            f"Failed to read trust list {self._path}",
        )

    def load(self) -> Result[tuple[TrustListEntry, ...]]:
        return (
            self.load_document()
            .flat_map(
                lambda document: Result.from_computation(
                    lambda: serializer.decode_entries(document),
                    ErrorCode.REGISTRY_READ_ERROR,
                    f"Malformed trust list {self._path}",
                )
            )
            .peek(lambda entries: log.debug("registry.loaded", path=str(self._path), entries=len(entries)))
        )

    def save(self, entries: tuple[TrustListEntry, ...]) -> Result[int]:
        return (
            self._render(entries)
            .flat_map(self._check_round_trip)
            .flat_map(self._check_schema)
            .flat_map(self._write)
        )

    # ─────────────────────── save stages ───────────────────────

    def _render(self, entries: tuple[TrustListEntry, ...]) -> Result[tuple[list[dict[str, Any]], str]]:
        def render() -> tuple[list[dict[str, Any]], str]:
            document = serializer.encode_entries(entries)
            return document, serializer.dumps(document)

        return Result.from_computation(
            render,
            ErrorCode.REGISTRY_WRITE_ERROR,
            "Failed to serialize trust list",
        )

    def _check_round_trip(
        self, rendered: tuple[list[dict[str, Any]], str]
    ) -> Result[tuple[list[dict[str, Any]], str]]:
        document, text = rendered
        return Result.from_computation(
            lambda: serializer.loads(text),
            ErrorCode.REGISTRY_WRITE_ERROR,
            "Serialized trust list is not valid JSON",
        ).flat_map(
            lambda reparsed: Result.success(rendered)
            if reparsed == document
            else Result.failure(
                ErrorCode.REGISTRY_WRITE_ERROR,
                "Serialized trust list does not round-trip to the same document",
            )
        )

    def _check_schema(
        self, rendered: tuple[list[dict[str, Any]], str]
    ) -> Result[str]:
        document, text = rendered
        violations = self._validator.validate(document)
        if violations:
            log.error("registry.schema_rejected", path=str(self._path), errors=len(violations))
            return Result.failure(
                ErrorCode.SCHEMA_VALIDATION_ERROR,
                f"Refusing to write {self._path.name}: trust list does not match the schema",
                details=[str(v) for v in violations],
            )
        return Result.success(text)

    def _write(self, text: str) -> Result[int]:
        return Result.from_computation(
            lambda: _atomic_write(self._path, text),
            ErrorCode.REGISTRY_WRITE_ERROR,
            f"Failed to write trust list {self._path}",
        ).peek(lambda size: log.info("registry.written", path=str(self._path), bytes=size))
