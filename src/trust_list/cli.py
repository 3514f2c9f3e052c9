"""
Command-line entry points.

  check-expirations    report expired / soon-to-expire certificates
  pem-to-entry         turn a certificate file into a trust-list entry (or merge it)
  validate-trust-list  validate trust-list.json against its JSON Schema

Each entry point returns the process exit code. Reports and entry fragments
go to stdout; warnings, errors and logs go to stderr.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from railway import FailureDescription

from trust_list.adapters import serializer
from trust_list.config import TrustListSettings
from trust_list.domain.models import (
    CertificateMetadata,
    ExpirationFinding,
    ExpirationReport,
    ExpirationStatus,
    MergeOutcome,
    MergeStatus,
    TrustListEntry,
)
from trust_list.main import configure_structlog, create_parser, create_services, load_settings
from trust_list.pipeline import add_certificate, run_create_entry, run_expiration_check, run_validation

EXIT_OK = 0
EXIT_FAILURE = 1


# ─────────────────────── Shared plumbing ───────────────────────


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--trust-list", dest="trust_list_path", type=Path, help="registry file (default: trust-list.json)")
    common.add_argument("--schema", dest="schema_path", type=Path, help="JSON Schema file (default: trust-list.schema.json)")
    common.add_argument("--log-level", dest="log_level", help="log level for stderr diagnostics (default: WARNING)")
    return common


def _print_failure(prefix: str, error: FailureDescription) -> int:
    print(f"❌ {prefix}: {error.message}", file=sys.stderr)
    for detail in error.details:
        print(f"  - {detail}", file=sys.stderr)
    return EXIT_FAILURE


def _bootstrap(args: argparse.Namespace, prefix: str, **values: object) -> TrustListSettings | None:
    """Validate settings and configure logging; prints the error and returns None on failure."""
    settings = load_settings(
        trust_list_path=args.trust_list_path,
        schema_path=args.schema_path,
        log_level=args.log_level,
        **values,
    )
    if settings.is_failure():
        _print_failure(prefix, settings.error())
        return None
    configure_structlog(settings.value().log_level)
    return settings.value()


# ─────────────────────── check-expirations ───────────────────────


def format_finding(finding: ExpirationFinding) -> str:
    date = finding.not_after.date().isoformat()
    head = (
        f"Issuer {finding.issuer_position} ({finding.issuer_name}): "
        f"Certificate {finding.certificate_position}"
    )
    if finding.status is ExpirationStatus.EXPIRED:
        return f"{head} expired on {date}"
    return f"{head} expires in {finding.days_until_expiration} days on {date}"


def _report_expirations(report: ExpirationReport, settings: TrustListSettings) -> int:
    if report.expiring_soon:
        print("⚠️  Certificate expirations upcoming soon:", file=sys.stderr)
        for finding in report.expiring_soon:
            print(f"  - {format_finding(finding)}", file=sys.stderr)

    if report.expired:
        print("❌ Certificate expirations:", file=sys.stderr)
        for finding in report.expired:
            print(f"  - {format_finding(finding)}", file=sys.stderr)

    if report.expiring_soon:
        print(f"⚠️  {len(report.expiring_soon)} certificate(s) expiring soon - please review")
    if report.expired:
        print(f"❌  {len(report.expired)} certificate(s) expired - please review")
    if not report.has_findings:
        print("✅ No expired or expiring certificates found")

    if settings.fail_on_expired and report.expired:
        return EXIT_FAILURE
    if settings.fail_on_expiring and report.expiring_soon:
        return EXIT_FAILURE
    return EXIT_OK


def check_expirations_main(argv: Sequence[str] | None = None, now: datetime | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="check-expirations",
        description="Report expired and soon-to-expire certificates in the trust list.",
        parents=[_common_parser()],
    )
    parser.add_argument("--warning-months", type=int, help="warning horizon in calendar months (default: 1)")
    parser.add_argument("--fail-on-expired", action="store_true", default=None, help="exit 1 when a certificate has expired")
    parser.add_argument("--fail-on-expiring", action="store_true", default=None, help="exit 1 when a certificate expires soon")
    args = parser.parse_args(argv)

    prefix = "Error checking certificate expirations"
    settings = _bootstrap(
        args,
        prefix,
        warning_months=args.warning_months,
        fail_on_expired=args.fail_on_expired,
        fail_on_expiring=args.fail_on_expiring,
    )
    if settings is None:
        return EXIT_FAILURE

    moment = now or datetime.now(UTC)
    return (
        create_services(settings)
        .flat_map(
            lambda services: run_expiration_check(
                services.repository, services.parser, moment, settings.warning_months
            )
        )
        .either(
            on_success=lambda report: _report_expirations(report, settings),
            on_failure=lambda error: _print_failure(prefix, error),
        )
    )


# ─────────────────────── pem-to-entry ───────────────────────


def describe_certificate(metadata: CertificateMetadata) -> str:
    """Human-readable dump printed by --print-cert."""
    return "\n".join(
        [
            "Certificate:",
            f"    Subject: {metadata.subject_dn}",
            f"    Issuer: {metadata.issuer_dn}",
            f"    Serial Number: {metadata.serial_number}",
            f"    Not Before: {metadata.not_before.isoformat()}",
            f"    Not After : {metadata.not_after.isoformat()}",
            f"    X509v3 Subject Key Identifier: {metadata.ski}",
            f"    SHA-256 Fingerprint: {metadata.sha256_fingerprint}",
        ]
    )


_STATUS_LINES = {
    MergeStatus.ADDED: "✅ Entry added to {file}",
    MergeStatus.CERTIFICATE_ADDED: "✅ Certificate added to entry in {file}",
    MergeStatus.CERTIFICATE_UPDATED: "✅ Certificate updated for entry in {file}",
    MergeStatus.ALREADY_EXISTS: "✅ Certificate already exists for entry in {file}",
}


def _print_entry(entry: TrustListEntry) -> int:
    print(serializer.dumps(serializer.encode_entry(entry)), end="")
    return EXIT_OK


def _print_outcome(outcome: MergeOutcome, settings: TrustListSettings) -> int:
    print(_STATUS_LINES[outcome.status].format(file=settings.trust_list_path.name))
    return EXIT_OK


def pem_to_entry_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pem-to-entry",
        description="Convert a certificate (.pem, .cer, .crt, .der) into a trust-list entry.",
        parents=[_common_parser()],
    )
    parser.add_argument("certificate", type=Path, help="path to the certificate file")
    parser.add_argument("--add", action="store_true", help="merge the entry into the trust list file")
    parser.add_argument("--print-cert", action="store_true", help="print the parsed certificate first")
    parser.add_argument("--source", help="provenance recorded on a new certificate record")
    parser.add_argument("--entity-type", dest="entity_type", help="entity type of a new entry (default: government)")
    args = parser.parse_args(argv)

    prefix = "Error"
    settings = _bootstrap(args, prefix, entity_type=args.entity_type, source=args.source)
    if settings is None:
        return EXIT_FAILURE

    def _show(metadata: CertificateMetadata) -> None:
        if args.print_cert:
            print(describe_certificate(metadata))

    certificate_parser = create_parser()

    if not args.add:
        return (
            run_create_entry(args.certificate, certificate_parser, settings.entity_type, settings.source)
            .peek(lambda pair: _show(pair[0]))
            .either(
                on_success=lambda pair: _print_entry(pair[1]),
                on_failure=lambda error: _print_failure(prefix, error),
            )
        )

    return (
        certificate_parser.parse_file(args.certificate)
        .peek(_show)
        .flat_map(
            lambda metadata: create_services(settings).flat_map(
                lambda services: add_certificate(
                    metadata,
                    services.parser,
                    services.repository,
                    settings.entity_type,
                    settings.source,
                )
            )
        )
        .either(
            on_success=lambda outcome: _print_outcome(outcome, settings),
            on_failure=lambda error: _print_failure(prefix, error),
        )
    )


# ─────────────────────── validate-trust-list ───────────────────────


def _print_validation_failure(error: FailureDescription) -> int:
    if error.details:
        print("❌ Trust list validation failed:", file=sys.stderr)
        for detail in error.details:
            print(f"  - {detail}", file=sys.stderr)
        return EXIT_FAILURE
    return _print_failure("Error validating trust list", error)


def _print_validation_success(_entries: int) -> int:
    print("✅ Trust list validation passed")
    return EXIT_OK


def validate_trust_list_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="validate-trust-list",
        description="Validate the trust list against its JSON Schema.",
        parents=[_common_parser()],
    )
    args = parser.parse_args(argv)

    settings = _bootstrap(args, "Error validating trust list")
    if settings is None:
        return EXIT_FAILURE

    return (
        create_services(settings)
        .flat_map(lambda services: run_validation(services.repository, services.validator))
        .either(
            on_success=_print_validation_success,
            on_failure=_print_validation_failure,
        )
    )
