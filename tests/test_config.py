"""Tests for settings and clock configuration."""

from datetime import date
from pathlib import Path

import pytest

from daylog.config import Settings, build_clock


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DIARY_PATH", raising=False)

    settings = Settings(_env_file=None)

    assert settings.diary_path == Path("diary.json")
    assert settings.graph_points == 8
    assert settings.day_points == 8
    assert settings.start_date is None


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DIARY_PATH", "/tmp/other.json")
    monkeypatch.setenv("START_DATE", "2024-03-13")
    monkeypatch.setenv("AUTOSAVE_INTERVAL_SECONDS", "0")

    settings = Settings(_env_file=None)

    assert settings.diary_path == Path("/tmp/other.json")
    assert settings.start_date == date(2024, 3, 13)
    assert settings.autosave_interval_seconds == 0


def test_build_clock_pins_start_date() -> None:
    clock = build_clock(date(2024, 3, 13))

    assert clock() == date(2024, 3, 13)


def test_build_clock_defaults_to_system_date() -> None:
    assert build_clock(None) == date.today
