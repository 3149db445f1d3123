"""Date-keyed entry store."""

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator
from datetime import date
from typing import Protocol

from daylog.domain.days import last_of_month
from daylog.domain.entries import Entry


class EntryRepository(Protocol):
    """Persistence interface for the whole entry store."""

    def load(self) -> "EntryStore":
        """Return the persisted store, or an empty one if nothing is stored."""

    def save(self, store: "EntryStore") -> None:
        """Replace the persisted store with ``store``."""


class EntryStore:
    """Entries kept strictly ascending by date, one per date."""

    def __init__(self) -> None:
        self._entries: list[Entry] = []

    @classmethod
    def from_entries(cls, entries: Iterable[Entry]) -> "EntryStore":
        """Build a store by upserting each entry; later duplicates win."""
        store = cls()
        for entry in entries:
            store.upsert(entry)
        return store

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntryStore):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"EntryStore({self._entries!r})"

    def entries(self) -> list[Entry]:
        return list(self._entries)

    def get(self, day: date) -> Entry | None:
        """Return the entry recorded for ``day``, if present."""
        index = self._index_of(day)
        if index is None:
            return None
        return self._entries[index]

    def upsert(self, entry: Entry) -> None:
        """Replace the entry for the same date or insert it in date order."""
        index = self._index_of(entry.date)
        if index is not None:
            self._entries[index] = entry
            return
        position = bisect_right(self._entries, entry.date, key=_entry_date)
        self._entries.insert(position, entry)

    def remove(self, day: date) -> Entry | None:
        """Remove and return the entry for ``day``, if present."""
        index = self._index_of(day)
        if index is None:
            return None
        return self._entries.pop(index)

    def between(self, start: date, end: date) -> list[Entry]:
        """Return entries dated within ``start`` and ``end`` inclusive."""
        if end < start:
            return []
        low = bisect_left(self._entries, start, key=_entry_date)
        high = bisect_right(self._entries, end, key=_entry_date)
        return self._entries[low:high]

    def with_content(self) -> list[Entry]:
        """Return entries that have text, in chronological order."""
        return [entry for entry in self._entries if entry.content]

    def dates_in_month(self, year: int, month: int) -> list[date]:
        """Return dates in the given month that have an entry."""
        start = date(year, month, 1)
        return [entry.date for entry in self.between(start, last_of_month(start))]

    def _index_of(self, day: date) -> int | None:
        index = bisect_left(self._entries, day, key=_entry_date)
        if index < len(self._entries) and self._entries[index].date == day:
            return index
        return None


def _entry_date(entry: Entry) -> date:
    return entry.date
