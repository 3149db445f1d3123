"""JSON file repository for the entry store."""

import datetime
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, TypeAdapter, ValidationError

from daylog.domain.entries import Entry
from daylog.errors import EntryStoreLoadError, EntryStoreWriteError
from daylog.services.entries import EntryRepository, EntryStore

logger = logging.getLogger(__name__)


class EntryRecord(BaseModel):
    """Serialized form of one entry."""

    content: str
    weight_kg: float | None = None
    waist_cm: float | None = None
    date: datetime.date


_RECORDS = TypeAdapter(list[EntryRecord])


def serialize_entries(store: EntryStore) -> bytes:
    """Encode the store as a pretty-printed JSON array in store order."""
    records = [
        EntryRecord(
            content=entry.content,
            weight_kg=entry.weight_kg,
            waist_cm=entry.waist_cm,
            date=entry.date,
        )
        for entry in store
    ]
    return _RECORDS.dump_json(records, indent=2)


def deserialize_entries(raw: bytes | str) -> EntryStore:
    """Decode a JSON array into a store, re-sorting by date.

    Raises:
        pydantic.ValidationError: If the payload is not a list of entries.
    """
    records = _RECORDS.validate_json(raw)
    return EntryStore.from_entries(
        Entry(
            date=record.date,
            content=record.content,
            weight_kg=record.weight_kg,
            waist_cm=record.waist_cm,
        )
        for record in records
    )


@dataclass
class JsonFileEntryRepository(EntryRepository):
    """Stores the whole diary in one JSON file."""

    path: Path

    def load(self) -> EntryStore:
        """Read the diary file.

        A missing or blank file yields an empty store.

        Raises:
            EntryStoreLoadError: If the file cannot be read or parsed.
        """
        if not self.path.exists():
            logger.info("No diary file yet", extra={"path": str(self.path)})
            return EntryStore()
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise EntryStoreLoadError(self.path, str(exc)) from exc
        if not raw.strip():
            return EntryStore()
        try:
            store = deserialize_entries(raw)
        except ValidationError as exc:
            raise EntryStoreLoadError(self.path, "malformed diary data") from exc
        logger.info(
            "Loaded diary", extra={"path": str(self.path), "entries": len(store)}
        )
        return store

    def save(self, store: EntryStore) -> None:
        """Atomically replace the diary file with ``store``.

        Raises:
            EntryStoreWriteError: If the file cannot be written.
        """
        payload = serialize_entries(store)
        tmp_path: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.write(b"\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise EntryStoreWriteError(self.path, str(exc)) from exc
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        logger.debug("Saved diary", extra={"path": str(self.path), "entries": len(store)})
