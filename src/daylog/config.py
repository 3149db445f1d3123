"""Application configuration."""

import os
from collections.abc import Callable
from datetime import date
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    diary_path: Path = Path("diary.json")
    autosave_interval_seconds: float = 60.0
    graph_points: int = 8
    day_points: int = 8
    cursor_marker: str = "█"
    start_date: date | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def build_clock(start_date: date | None) -> Callable[[], date]:
    """Return a clock pinned to ``start_date``, or the system date if unset."""
    if start_date is None:
        return date.today
    return lambda: start_date
