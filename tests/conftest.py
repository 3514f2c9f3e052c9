"""
Shared test fixtures for the trust-list test suite.

Certificate builders live in factories.py so test modules can import them;
this module only turns them into fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from factories import IssuedCertificate, make_certificate

from trust_list.adapters.schema_validator import JsonSchemaValidator, load_validator
from trust_list.adapters.x509_parser import CryptographyCertificateParser


@pytest.fixture()
def parser() -> CryptographyCertificateParser:
    return CryptographyCertificateParser()


@pytest.fixture()
def validator() -> JsonSchemaValidator:
    """Validator built from the schema bundled with the package."""
    return load_validator().value()


@pytest.fixture()
def certificate() -> IssuedCertificate:
    """A valid certificate with SKI AA:BB:CC:DD, O=Republic of Testland."""
    return make_certificate()


@pytest.fixture()
def write_file(tmp_path: Path):
    """Write bytes or text under tmp_path and return the path."""

    def _write(name: str, content: bytes | str) -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path

    return _write
