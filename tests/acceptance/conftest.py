"""
Acceptance test fixtures — a temporary working directory per test.

The CLI resolves trust-list.json and trust-list.schema.json against the
current working directory, so every test runs inside its own tmp_path.
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """chdir into an empty directory for the duration of the test."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def empty_registry(workdir: Path) -> Path:
    path = workdir / "trust-list.json"
    path.write_text("[]\n", encoding="utf-8")
    return path
