"""
X.509 parser adapter — certificate bytes → CertificateMetadata.

Adapter layer — implements the CertificateParser port using:
  - asn1crypto: PEM detection, unarmoring to DER, and re-armoring DER to PEM
  - cryptography (PyCA): X.509 decoding and metadata (SKI, subject, validity)

Format probe (explicit checks, no exception-driven branching):
  1. bytes carry a "-----BEGIN" marker  → PEM; the text itself is stored
  2. extension marks a binary file      → DER; re-armored to PEM for storage
     (.cer/.crt/.der, or raw bytes with no file name at all)
  3. .pem without a PEM block           → UNPARSABLE_CERTIFICATE
  4. anything else                      → UNSUPPORTED_FILE_FORMAT

Parsing happens in memory; nothing is written to disk.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from asn1crypto import pem
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.x509.extensions import ExtensionNotFound
from cryptography.x509.oid import NameOID
from railway import ErrorCode
from railway.result import Result

from trust_list.domain.identity import format_ski
from trust_list.domain.models import CertificateMetadata, SubjectFields

log = structlog.get_logger()

PEM_EXTENSIONS = frozenset({".pem"})
BINARY_EXTENSIONS = frozenset({".cer", ".crt", ".der"})

_PEM_CERTIFICATE_TYPE = "CERTIFICATE"


def normalize_pem(text: str) -> str:
    """CRLF → LF, and no trailing newline."""
    return text.replace("\r\n", "\n").rstrip("\n")


def der_to_pem(der_bytes: bytes) -> str:
    return normalize_pem(pem.armor(_PEM_CERTIFICATE_TYPE, der_bytes).decode("ascii"))


# ─────────────────────── Format probe ───────────────────────


def _unarmor(data: bytes) -> tuple[bytes, str]:
    """Decode a PEM certificate block; returns (der, normalized PEM text)."""
    object_type, _headers, der_bytes = pem.unarmor(data)
    if object_type != _PEM_CERTIFICATE_TYPE:
        raise ValueError(f"expected a {_PEM_CERTIFICATE_TYPE} block, found {object_type}")
    return der_bytes, normalize_pem(data.decode("utf-8"))


def _decode(data: bytes, filename: str | None) -> Result[tuple[bytes, str]]:
    suffix = Path(filename).suffix.lower() if filename else None

    if pem.detect(data):
        return Result.from_computation(
            lambda: _unarmor(data),
            ErrorCode.UNPARSABLE_CERTIFICATE,
            "Invalid PEM certificate",
        )

    if suffix is None or suffix in BINARY_EXTENSIONS:
        return Result.success((data, der_to_pem(data)))

    if suffix in PEM_EXTENSIONS:
        return Result.failure(
            ErrorCode.UNPARSABLE_CERTIFICATE,
            f"{filename} does not contain a PEM certificate",
        )

    return Result.failure(
        ErrorCode.UNSUPPORTED_FILE_FORMAT,
        f"Unsupported certificate format {suffix or '(no extension)'}. "
        "Please use .pem, .cer, .crt or .der files.",
    )


# ─────────────────────── Metadata extraction ───────────────────────


def _first_attribute(name: x509.Name, oid: x509.ObjectIdentifier) -> str | None:
    attributes = name.get_attributes_for_oid(oid)
    if not attributes:
        return None
    return str(attributes[0].value)


def _extract_subject(cert: x509.Certificate) -> SubjectFields:
    return SubjectFields(
        country=_first_attribute(cert.subject, NameOID.COUNTRY_NAME),
        organization=_first_attribute(cert.subject, NameOID.ORGANIZATION_NAME),
        common_name=_first_attribute(cert.subject, NameOID.COMMON_NAME),
    )


def _extract_ski(cert: x509.Certificate) -> Result[str]:
    """Subject Key Identifier as 'A1:B2:...'; its absence is an error here."""
    try:
        ext = cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier)
    except ExtensionNotFound:
        return Result.failure(
            ErrorCode.MISSING_SUBJECT_KEY_IDENTIFIER,
            f"Subject Key Identifier not found in certificate {cert.subject.rfc4514_string()!r}",
        )
    except ValueError as e:
        return Result.failure(
            ErrorCode.UNPARSABLE_CERTIFICATE,
            f"Certificate extensions are malformed: {e}",
            e,
        )
    return Result.success(format_ski(ext.value.digest))


def _to_metadata(cert: x509.Certificate, pem_text: str) -> Result[CertificateMetadata]:
    return _extract_ski(cert).map(
        lambda ski: CertificateMetadata(
            ski=ski,
            subject=_extract_subject(cert),
            pem_content=pem_text,
            not_before=cert.not_valid_before_utc,
            not_after=cert.not_valid_after_utc,
            subject_dn=cert.subject.rfc4514_string(),
            issuer_dn=cert.issuer.rfc4514_string(),
            serial_number=hex(cert.serial_number),
            sha256_fingerprint=cert.fingerprint(hashes.SHA256()).hex(":").upper(),
        )
    )


def _load(decoded: tuple[bytes, str]) -> Result[CertificateMetadata]:
    der_bytes, pem_text = decoded
    return Result.from_computation(
        lambda: x509.load_der_x509_certificate(der_bytes),
        ErrorCode.UNPARSABLE_CERTIFICATE,
        "Not a valid PEM or DER X.509 certificate",
    ).flat_map(lambda cert: _to_metadata(cert, pem_text))


# ─────────────────────── Public Parser Class ───────────────────────


class CryptographyCertificateParser:
    """
    Parse certificate bytes or files into CertificateMetadata.

    Implements the CertificateParser port. Library exceptions are caught at
    this boundary and returned on the failure track.
    """

    def parse(self, data: bytes, filename: str | None = None) -> Result[CertificateMetadata]:
        return (
            _decode(data, filename)
            .flat_map(_load)
            .peek(lambda meta: log.debug("certificate.parsed", ski=meta.ski, subject=meta.subject_dn))
        )

    def parse_file(self, path: Path) -> Result[CertificateMetadata]:
        return Result.from_computation(
            lambda: Path(path).read_bytes(),
            ErrorCode.UNPARSABLE_CERTIFICATE,
            f"Failed to read certificate file {path}",
        ).flat_map(lambda data: self.parse(data, Path(path).name))
