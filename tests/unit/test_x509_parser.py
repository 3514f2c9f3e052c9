"""
Unit tests for the X.509 parser adapter.

Test categories:
  - PEM input: metadata extraction and PEM normalization
  - DER input: format probe by extension, re-armoring to PEM
  - Error path: garbage, unsupported extension, missing SKI, wrong PEM type
"""

from __future__ import annotations

from datetime import timedelta

from asn1crypto import pem
from factories import NOW, make_certificate
from railway import ErrorCode, ResultAssertions

from trust_list.adapters.x509_parser import (
    CryptographyCertificateParser,
    der_to_pem,
    normalize_pem,
)


class TestParsePem:
    """
    GIVEN a PEM encoded certificate
    WHEN the parser processes it
    THEN it returns normalized metadata.
    """

    def test_extracts_ski_as_colon_hex(self, parser: CryptographyCertificateParser, certificate) -> None:
        meta = ResultAssertions.assert_success(parser.parse(certificate.pem_text.encode()))
        assert meta.ski == "AA:BB:CC:DD"

    def test_extracts_subject_fields(self, parser: CryptographyCertificateParser, certificate) -> None:
        meta = ResultAssertions.assert_success(parser.parse(certificate.pem_text.encode()))
        assert meta.subject.country == "XX"
        assert meta.subject.organization == "Republic of Testland"
        assert meta.subject.common_name == "Testland CSCA"

    def test_missing_subject_fields_are_none(self, parser: CryptographyCertificateParser) -> None:
        """
        GIVEN a certificate whose subject only has C=
        WHEN parsed
        THEN organization and common_name are absent, and the display name is ''.
        """
        cert = make_certificate(organization=None, common_name=None)
        meta = ResultAssertions.assert_success(parser.parse(cert.pem_text.encode()))
        assert meta.subject.organization is None
        assert meta.subject.common_name is None
        assert meta.subject.display_name == ""

    def test_extracts_validity_in_utc(self, parser: CryptographyCertificateParser) -> None:
        not_after = NOW + timedelta(days=10)
        cert = make_certificate(not_after=not_after)
        meta = ResultAssertions.assert_success(parser.parse(cert.pem_text.encode()))
        assert meta.not_after == not_after
        assert meta.not_after.tzinfo is not None

    def test_pem_content_has_no_trailing_newline(self, parser: CryptographyCertificateParser, certificate) -> None:
        meta = ResultAssertions.assert_success(parser.parse(certificate.pem_text.encode()))
        assert meta.pem_content == certificate.pem
        assert not meta.pem_content.endswith("\n")

    def test_crlf_line_endings_are_normalized(self, parser: CryptographyCertificateParser, certificate) -> None:
        """
        GIVEN a PEM file saved with CRLF line endings
        WHEN parsed
        THEN the stored PEM uses LF only and equals the LF version.
        """
        crlf = certificate.pem_text.replace("\n", "\r\n").encode()
        meta = ResultAssertions.assert_success(parser.parse(crlf, "windows.pem"))
        assert "\r" not in meta.pem_content
        assert meta.pem_content == certificate.pem

    def test_display_fields_are_populated(self, parser: CryptographyCertificateParser, certificate) -> None:
        meta = ResultAssertions.assert_success(parser.parse(certificate.pem_text.encode()))
        assert "O=Republic of Testland" in meta.subject_dn
        assert meta.issuer_dn == meta.subject_dn
        assert meta.serial_number.startswith("0x")
        assert len(meta.sha256_fingerprint.split(":")) == 32


class TestParseDer:
    """
    GIVEN a DER encoded certificate
    WHEN the parser processes it with a binary extension (or no file name)
    THEN it re-armors it to PEM for storage.
    """

    def test_cer_extension_decodes_der(self, parser: CryptographyCertificateParser, certificate) -> None:
        meta = ResultAssertions.assert_success(parser.parse(certificate.der, "csca.cer"))
        assert meta.ski == "AA:BB:CC:DD"
        assert meta.pem_content.startswith("-----BEGIN CERTIFICATE-----")
        assert meta.pem_content.endswith("-----END CERTIFICATE-----")

    def test_der_is_stored_as_equivalent_pem(self, parser: CryptographyCertificateParser, certificate) -> None:
        meta = ResultAssertions.assert_success(parser.parse(certificate.der, "csca.crt"))
        _, _, der_again = pem.unarmor(meta.pem_content.encode())
        assert der_again == certificate.der

    def test_raw_bytes_without_name_decode_der(self, parser: CryptographyCertificateParser, certificate) -> None:
        ResultAssertions.assert_success(parser.parse(certificate.der))

    def test_pem_inside_crt_file_is_read_as_pem(self, parser: CryptographyCertificateParser, certificate) -> None:
        """
        GIVEN a .crt file that actually holds PEM text
        WHEN parsed
        THEN the PEM text itself is stored.
        """
        meta = ResultAssertions.assert_success(parser.parse(certificate.pem_text.encode(), "ca.crt"))
        assert meta.pem_content == certificate.pem


class TestParseErrors:
    """Every rejected input lands on the failure track with a specific code."""

    def test_garbage_bytes_are_unparsable(self, parser: CryptographyCertificateParser) -> None:
        result = parser.parse(b"\x30\x83\x01\x00", "broken.der")
        ResultAssertions.assert_failure(result, ErrorCode.UNPARSABLE_CERTIFICATE)

    def test_empty_input_is_unparsable(self, parser: CryptographyCertificateParser) -> None:
        ResultAssertions.assert_failure(parser.parse(b""), ErrorCode.UNPARSABLE_CERTIFICATE)

    def test_pem_file_without_pem_block_is_unparsable(self, parser: CryptographyCertificateParser, certificate) -> None:
        result = parser.parse(certificate.der, "binary.pem")
        ResultAssertions.assert_failure(result, ErrorCode.UNPARSABLE_CERTIFICATE)

    def test_unknown_extension_is_unsupported(self, parser: CryptographyCertificateParser, certificate) -> None:
        """
        GIVEN DER bytes in a .txt file
        WHEN parsed
        THEN it fails with UNSUPPORTED_FILE_FORMAT.
        """
        result = parser.parse(certificate.der, "certificate.txt")
        ResultAssertions.assert_failure(result, ErrorCode.UNSUPPORTED_FILE_FORMAT)
        ResultAssertions.assert_failure_message_contains(result, ".pem, .cer, .crt")

    def test_corrupt_pem_body_is_unparsable(self, parser: CryptographyCertificateParser) -> None:
        text = b"-----BEGIN CERTIFICATE-----\nbm90IGEgY2VydGlmaWNhdGU=\n-----END CERTIFICATE-----\n"
        ResultAssertions.assert_failure(parser.parse(text, "x.pem"), ErrorCode.UNPARSABLE_CERTIFICATE)

    def test_non_certificate_pem_block_is_unparsable(self, parser: CryptographyCertificateParser, certificate) -> None:
        text = pem.armor("PUBLIC KEY", certificate.der)
        result = parser.parse(text, "key.pem")
        ResultAssertions.assert_failure(result, ErrorCode.UNPARSABLE_CERTIFICATE)
        ResultAssertions.assert_failure_message_contains(result, "PUBLIC KEY")

    def test_missing_ski_is_reported(self, parser: CryptographyCertificateParser) -> None:
        """
        GIVEN a certificate without a Subject Key Identifier extension
        WHEN parsed
        THEN it fails with MISSING_SUBJECT_KEY_IDENTIFIER.
        """
        cert = make_certificate(ski=None)
        result = parser.parse(cert.pem_text.encode())
        ResultAssertions.assert_failure(result, ErrorCode.MISSING_SUBJECT_KEY_IDENTIFIER)


class TestParseFile:
    def test_reads_file_and_uses_its_extension(self, parser: CryptographyCertificateParser, certificate, write_file) -> None:
        path = write_file("issuer.der", certificate.der)
        meta = ResultAssertions.assert_success(parser.parse_file(path))
        assert meta.ski == "AA:BB:CC:DD"

    def test_missing_file_fails(self, parser: CryptographyCertificateParser, tmp_path) -> None:
        result = parser.parse_file(tmp_path / "missing.pem")
        ResultAssertions.assert_failure(result, ErrorCode.UNPARSABLE_CERTIFICATE)
        ResultAssertions.assert_failure_message_contains(result, "missing.pem")

    def test_does_not_leave_files_behind(self, parser: CryptographyCertificateParser, tmp_path, write_file) -> None:
        path = write_file("broken.cer", b"\x00\x01garbage")
        parser.parse_file(path)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["broken.cer"]


class TestHelpers:
    def test_normalize_pem_strips_all_trailing_newlines(self) -> None:
        assert normalize_pem("a\r\nb\r\n\r\n") == "a\nb"

    def test_der_to_pem_wraps_in_certificate_block(self, certificate) -> None:
        text = der_to_pem(certificate.der)
        assert text.splitlines()[0] == "-----BEGIN CERTIFICATE-----"
        assert text.splitlines()[-1] == "-----END CERTIFICATE-----"
