"""
Configuration — typed, validated settings for the trust-list commands.

Uses pydantic-settings for validation at startup. The commands are meant to
behave the same on every machine, so the only source is the values the CLI
passes in: environment variables and .env files are deliberately not read.
Relative paths resolve against the current working directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from trust_list.domain.expiration import DEFAULT_WARNING_MONTHS
from trust_list.domain.models import DEFAULT_ENTITY_TYPE

DEFAULT_TRUST_LIST = Path("trust-list.json")
DEFAULT_SCHEMA = Path("trust-list.schema.json")


class TrustListSettings(BaseSettings):
    """
    Settings shared by check-expirations, pem-to-entry and validate-trust-list.

    `schema_path` of None means: use ./trust-list.schema.json when it exists,
    else the schema bundled with the package (see `resolved_schema_path`).
    """

    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    trust_list_path: Path = Field(default=DEFAULT_TRUST_LIST, description="Registry file")
    schema_path: Path | None = Field(default=None, description="JSON Schema file")

    warning_months: int = Field(
        default=DEFAULT_WARNING_MONTHS,
        ge=1,
        description="Warning horizon in calendar months",
    )
    fail_on_expired: bool = Field(default=False, description="Exit 1 when expired certificates are found")
    fail_on_expiring: bool = Field(default=False, description="Exit 1 when certificates expire soon")

    entity_type: str = Field(default=DEFAULT_ENTITY_TYPE, min_length=1)
    source: str = Field(default="")

    log_level: str = Field(default="WARNING")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    def resolved_schema_path(self) -> Path | None:
        if self.schema_path is not None:
            return self.schema_path
        if DEFAULT_SCHEMA.is_file():
            return DEFAULT_SCHEMA
        return None
