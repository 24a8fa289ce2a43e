"""Shared fixtures: a predictable environment and in-memory outputs."""

from __future__ import annotations

from pathlib import Path

import pytest

from termstyle.output import BufferedOutput


@pytest.fixture(autouse=True)
def _stable_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("COLUMNS", "120")
    monkeypatch.setenv("TERMSTYLE_CONFIG", str(tmp_path / "no-settings.json"))
    for name in (
        "NO_COLOR",
        "FORCE_COLOR",
        "TERMSTYLE_LINE_LENGTH",
        "TERMSTYLE_VERBOSITY",
        "TERMSTYLE_DECORATED",
        "TERMSTYLE_TABLE_STYLE",
        "TERMSTYLE_BAR_WIDTH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def output() -> BufferedOutput:
    """Undecorated in-memory output."""
    return BufferedOutput(decorated=False)


@pytest.fixture
def decorated_output() -> BufferedOutput:
    return BufferedOutput(decorated=True)
