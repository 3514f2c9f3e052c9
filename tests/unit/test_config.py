"""
Unit tests for TrustListSettings — validation and schema path resolution.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from trust_list.config import TrustListSettings


class TestDefaults:
    def test_defaults(self) -> None:
        settings = TrustListSettings()
        assert settings.trust_list_path == Path("trust-list.json")
        assert settings.schema_path is None
        assert settings.warning_months == 1
        assert settings.fail_on_expired is False
        assert settings.fail_on_expiring is False
        assert settings.entity_type == "government"
        assert settings.source == ""
        assert settings.log_level == "WARNING"

    def test_environment_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """
        GIVEN environment variables named like the settings
        WHEN settings are built without arguments
        THEN the defaults still apply.
        """
        monkeypatch.setenv("WARNING_MONTHS", "6")
        monkeypatch.setenv("TRUST_LIST_PATH", "/elsewhere.json")
        settings = TrustListSettings()
        assert settings.warning_months == 1
        assert settings.trust_list_path == Path("trust-list.json")

    def test_settings_are_frozen(self) -> None:
        settings = TrustListSettings()
        with pytest.raises(ValidationError):
            settings.warning_months = 3


class TestValidation:
    @pytest.mark.parametrize("months", [0, -1])
    def test_warning_months_must_be_positive(self, months: int) -> None:
        with pytest.raises(ValidationError):
            TrustListSettings(warning_months=months)

    def test_entity_type_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            TrustListSettings(entity_type="")

    def test_log_level_is_normalized(self) -> None:
        assert TrustListSettings(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown log level"):
            TrustListSettings(log_level="LOUD")


class TestResolvedSchemaPath:
    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "trust-list.schema.json").write_text("{}", encoding="utf-8")
        settings = TrustListSettings(schema_path=Path("custom.json"))
        assert settings.resolved_schema_path() == Path("custom.json")

    def test_schema_in_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "trust-list.schema.json").write_text("{}", encoding="utf-8")
        assert TrustListSettings().resolved_schema_path() == Path("trust-list.schema.json")

    def test_falls_back_to_bundled(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert TrustListSettings().resolved_schema_path() is None
