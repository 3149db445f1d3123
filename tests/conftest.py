"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import pytest

from daylog.config import Settings
from daylog.containers import AppContainer, build_container
from daylog.domain.entries import Entry
from daylog.services.entries import EntryRepository, EntryStore
from daylog.services.sessions import DiarySession

TODAY = date(2024, 3, 13)


@dataclass
class InMemoryEntryRepository(EntryRepository):
    """In-memory entry repository for tests."""

    entries: list[Entry] = field(default_factory=list)
    saves: int = 0

    def load(self) -> EntryStore:
        return EntryStore.from_entries(self.entries)

    def save(self, store: EntryStore) -> None:
        self.entries = store.entries()
        self.saves += 1


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        diary_path=tmp_path / "diary.json",
        autosave_interval_seconds=0,
        start_date=TODAY,
    )


@pytest.fixture
def entry_repository() -> InMemoryEntryRepository:
    return InMemoryEntryRepository()


@pytest.fixture
def session(entry_repository: InMemoryEntryRepository) -> DiarySession:
    return DiarySession(
        store=entry_repository.load(),
        clock=lambda: TODAY,
        repository=entry_repository,
    )


@pytest.fixture
def container(
    settings: Settings, entry_repository: InMemoryEntryRepository
) -> AppContainer:
    return build_container(settings, repository=entry_repository)
