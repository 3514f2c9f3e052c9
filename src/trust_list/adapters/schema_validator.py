"""
JSON Schema adapter — validates trust-list documents (draft 2020-12).

Implements the SchemaValidator port with jsonschema's Draft202012Validator.
Each command builds its own validator from a schema document; nothing is
cached at module level.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

import structlog
from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError
from railway import ErrorCode
from railway.result import Result

from trust_list.domain.models import SchemaViolation

log = structlog.get_logger()

BUNDLED_SCHEMA = "trust-list.schema.json"


def _pointer(error: ValidationError) -> str:
    """JSON pointer of the failing instance, '/' for the document root."""
    if not error.absolute_path:
        return "/"
    return "".join(f"/{part}" for part in error.absolute_path)


class JsonSchemaValidator:
    """
    Validate decoded JSON against one compiled schema, collecting all errors.

    Implements the SchemaValidator port.
    """

    def __init__(self, schema: dict[str, Any]) -> None:
        Draft202012Validator.check_schema(schema)
        self._validator = Draft202012Validator(schema, format_checker=FormatChecker())

    def validate(self, document: Any) -> list[SchemaViolation]:
        errors = sorted(
            self._validator.iter_errors(document),
            key=lambda e: [(isinstance(part, str), part) for part in e.absolute_path],
        )
        violations = [SchemaViolation(_pointer(e), e.message) for e in errors]
        if violations:
            log.debug("schema.violations", count=len(violations))
        return violations


def _read_schema(path: Path | None) -> dict[str, Any]:
    if path is not None:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    bundled = resources.files("trust_list.resources").joinpath(BUNDLED_SCHEMA)
    return json.loads(bundled.read_text(encoding="utf-8"))


def load_validator(schema_path: Path | None = None) -> Result[JsonSchemaValidator]:
    """
    Build a validator from a schema file, or from the bundled schema when
    `schema_path` is None.
    """
    return Result.from_computation(
        lambda: JsonSchemaValidator(_read_schema(schema_path)),
        ErrorCode.CONFIGURATION_ERROR,
        f"Failed to load trust list schema {schema_path or BUNDLED_SCHEMA}",
    )
