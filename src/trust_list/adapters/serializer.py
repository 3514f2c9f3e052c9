"""
Registry serializer — canonical JSON text for the trust list.

Canonical form (kept stable so version-control diffs stay minimal):
  - two-space indentation, UTF-8 kept as-is (no \\u escapes)
  - fixed key order per record, unknown keys after the known ones
  - adjacent objects compacted onto one line: "}, {"
  - exactly one trailing newline
"""

from __future__ import annotations

import json
import re
from typing import Any

from trust_list.domain.models import (
    ALLOW_EXPIRED_KEY,
    CERTIFICATE_FORMAT_PEM,
    DEFAULT_ENTITY_TYPE,
    LEGACY_ALLOW_EXPIRED_KEY,
    CertificateRecord,
    TrustListEntry,
)

_ADJACENT_OBJECTS = re.compile(r"}\s*,\s*{")

_ENTRY_KEYS = ("issuer_id", "entity_type", "name", "certificates")
_RECORD_KEYS = (
    "certificate",
    "certificate_format",
    "source",
    ALLOW_EXPIRED_KEY,
    LEGACY_ALLOW_EXPIRED_KEY,
)


# ─────────────────────── Text ───────────────────────


def dumps(document: Any) -> str:
    text = json.dumps(document, indent=2, ensure_ascii=False)
    return _ADJACENT_OBJECTS.sub("}, {", text) + "\n"


def loads(text: str) -> Any:
    return json.loads(text)


# ─────────────────────── Entries ↔ document ───────────────────────


def encode_record(record: CertificateRecord) -> dict[str, Any]:
    encoded: dict[str, Any] = {
        "certificate": record.certificate,
        "certificate_format": record.certificate_format,
        "source": record.source,
    }
    if record.allow_expired is not None:
        encoded[record.allow_expired_key] = record.allow_expired
    encoded.update(record.extra)
    return encoded


def encode_entry(entry: TrustListEntry) -> dict[str, Any]:
    encoded: dict[str, Any] = {
        "issuer_id": entry.issuer_id,
        "entity_type": entry.entity_type,
        "name": entry.name,
        "certificates": [encode_record(record) for record in entry.certificates],
    }
    encoded.update(entry.extra)
    return encoded


def encode_entries(entries: tuple[TrustListEntry, ...]) -> list[dict[str, Any]]:
    return [encode_entry(entry) for entry in entries]


def _require(mapping: dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in mapping:
        raise ValueError(f"{where}: missing '{key}'")
    value = mapping[key]
    if not isinstance(value, kind):
        raise ValueError(f"{where}: '{key}' must be of type {kind.__name__}")
    return value


def _allow_expired_key(raw: dict[str, Any], where: str) -> str:
    """Spelling of the expiration opt-out in this record; "allowExpired" unless only the older one is present."""
    if ALLOW_EXPIRED_KEY in raw and LEGACY_ALLOW_EXPIRED_KEY in raw:
        raise ValueError(
            f"{where}: both '{ALLOW_EXPIRED_KEY}' and '{LEGACY_ALLOW_EXPIRED_KEY}' are set"
        )
    if LEGACY_ALLOW_EXPIRED_KEY in raw:
        return LEGACY_ALLOW_EXPIRED_KEY
    return ALLOW_EXPIRED_KEY


def decode_record(raw: Any, where: str) -> CertificateRecord:
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: certificate must be an object")
    allow_expired_key = _allow_expired_key(raw, where)
    allow_expired = raw.get(allow_expired_key)
    if allow_expired is not None and not isinstance(allow_expired, bool):
        raise ValueError(f"{where}: '{allow_expired_key}' must be of type bool")
    return CertificateRecord(
        certificate=_require(raw, "certificate", str, where),
        certificate_format=raw.get("certificate_format", CERTIFICATE_FORMAT_PEM),
        source=raw.get("source", ""),
        allow_expired=allow_expired,
        allow_expired_key=allow_expired_key,
        extra={k: v for k, v in raw.items() if k not in _RECORD_KEYS},
    )


def decode_entry(raw: Any, position: int) -> TrustListEntry:
    where = f"entry {position}"
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: must be an object")
    certificates = _require(raw, "certificates", list, where)
    return TrustListEntry(
        issuer_id=_require(raw, "issuer_id", str, where),
        name=raw.get("name", ""),
        entity_type=raw.get("entity_type", DEFAULT_ENTITY_TYPE),
        certificates=tuple(
            decode_record(cert, f"{where}, certificate {index}")
            for index, cert in enumerate(certificates, start=1)
        ),
        extra={k: v for k, v in raw.items() if k not in _ENTRY_KEYS},
    )


def decode_entries(document: Any) -> tuple[TrustListEntry, ...]:
    """
    Interpret a decoded registry document.

    Raises ValueError naming the first malformed entry; positions are 1-based.
    """
    if not isinstance(document, list):
        raise ValueError("trust list must be a JSON array of issuer entries")
    entries = tuple(decode_entry(raw, position) for position, raw in enumerate(document, start=1))
    seen: set[str] = set()
    for entry in entries:
        if entry.issuer_id in seen:
            raise ValueError(f"duplicate issuer_id {entry.issuer_id}")
        seen.add(entry.issuer_id)
    return entries


def serialize(entries: tuple[TrustListEntry, ...]) -> str:
    return dumps(encode_entries(entries))


def parse(text: str) -> tuple[TrustListEntry, ...]:
    return decode_entries(loads(text))
