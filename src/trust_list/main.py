"""
Composition root — logging setup and adapter wiring for the CLI commands.

This is the ONLY place where concrete adapter classes are instantiated.
Pipelines and domain code depend on the Protocol ports only.

Responsibilities:
  1. Configure structlog (human-readable lines on stderr)
  2. Build settings from command-line values
  3. Create the parser, schema validator and registry repository
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any

import structlog
from railway import ErrorCode
from railway.result import Result

from trust_list.adapters.repository import JsonFileTrustListRepository
from trust_list.adapters.schema_validator import JsonSchemaValidator, load_validator
from trust_list.adapters.x509_parser import CryptographyCertificateParser
from trust_list.config import TrustListSettings


def _stderr_logger(*_args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr at call time: stdout carries command output.
    return structlog.PrintLogger(sys.stderr)


def configure_structlog(log_level: str = "WARNING") -> None:
    """
    Configure structlog for console logging on stderr.

    Unknown level names fall back to WARNING.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.WARNING)
        ),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def load_settings(**values: Any) -> Result[TrustListSettings]:
    """Validate command-line values; None means "use the default"."""
    provided = {key: value for key, value in values.items() if value is not None}
    return Result.from_computation(
        lambda: TrustListSettings(**provided),
        ErrorCode.CONFIGURATION_ERROR,
        "Invalid configuration",
    )


@dataclass(frozen=True, slots=True)
class Services:
    """Adapters for one command invocation."""

    parser: CryptographyCertificateParser
    validator: JsonSchemaValidator
    repository: JsonFileTrustListRepository


def create_parser() -> CryptographyCertificateParser:
    return CryptographyCertificateParser()


def create_services(settings: TrustListSettings) -> Result[Services]:
    """Build the validator from the configured schema, then the repository around it."""
    schema_path = settings.resolved_schema_path()
    log = structlog.get_logger()
    log.debug(
        "app.wiring",
        trust_list=str(settings.trust_list_path),
        schema=str(schema_path) if schema_path else "bundled",
    )
    return load_validator(schema_path).map(
        lambda validator: Services(
            parser=create_parser(),
            validator=validator,
            repository=JsonFileTrustListRepository(settings.trust_list_path, validator),
        )
    )
