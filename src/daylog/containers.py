"""Dependency container wiring for the application."""

from dataclasses import dataclass

from daylog.adapters.json_entry_repository import JsonFileEntryRepository
from daylog.config import Settings, build_clock
from daylog.services.entries import EntryRepository
from daylog.services.graphs import Aggregator
from daylog.services.sessions import DiarySession


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    repository: EntryRepository
    session: DiarySession


def build_container(
    settings: Settings | None = None, repository: EntryRepository | None = None
) -> AppContainer:
    """Create the default dependency container.

    Raises:
        EntryStoreLoadError: If an existing diary file is corrupt.
    """
    resolved_settings = settings or Settings()
    resolved_repository = repository or JsonFileEntryRepository(
        resolved_settings.diary_path
    )
    store = resolved_repository.load()
    aggregator = Aggregator(
        store,
        graph_points=resolved_settings.graph_points,
        day_points=resolved_settings.day_points,
    )
    session = DiarySession(
        store=store,
        clock=build_clock(resolved_settings.start_date),
        repository=resolved_repository,
        aggregator=aggregator,
        cursor_marker=resolved_settings.cursor_marker,
    )
    return AppContainer(
        settings=resolved_settings,
        repository=resolved_repository,
        session=session,
    )
