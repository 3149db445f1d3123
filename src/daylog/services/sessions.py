"""Session state machine for browsing and editing diary entries."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from daylog.domain.days import DAYS_PER_WEEK, clamp_offset_day, next_day, previous_day
from daylog.domain.editing import DEFAULT_CURSOR_MARKER, EditBuffer, EditField
from daylog.domain.entries import Entry, Measurement, ZoomLevel, format_measurement
from daylog.errors import EntryStoreWriteError, InvalidTransitionError
from daylog.services.entries import EntryRepository, EntryStore
from daylog.services.graphs import Aggregator, GraphSeries

logger = logging.getLogger(__name__)

Clock = Callable[[], date]

DECIMAL_SEPARATORS = frozenset({".", ","})


class SessionState(Enum):
    """Screens the session can be on."""

    BROWSING = "browsing"
    EDITING = "editing"
    CONFIRM_DISCARD = "confirm_discard"


@dataclass
class DiarySession:
    """Owns the entry store and mediates browsing and editing."""

    store: EntryStore
    clock: Clock = date.today
    repository: EntryRepository | None = None
    aggregator: Aggregator | None = None
    cursor_marker: str = DEFAULT_CURSOR_MARKER
    state: SessionState = field(default=SessionState.BROWSING, init=False)
    current_date: date = field(init=False)
    zoom: ZoomLevel = field(default=ZoomLevel.DAY, init=False)
    active_field: EditField = field(default=EditField.CONTENT, init=False)
    _buffers: dict[EditField, EditBuffer] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        self.current_date = self.clock()
        if self.aggregator is None:
            self.aggregator = Aggregator(self.store)

    def current_entry(self) -> Entry | None:
        """Return the entry for the date being viewed, if any."""
        return self.store.get(self.current_date)

    # Browsing

    def go_to(self, day: date) -> None:
        if self.state is SessionState.BROWSING:
            self.current_date = day

    def go_to_today(self) -> None:
        self.go_to(self.clock())

    def next_day(self) -> None:
        self.go_to(next_day(self.current_date))

    def previous_day(self) -> None:
        self.go_to(previous_day(self.current_date))

    def next_week(self) -> None:
        self.go_to(clamp_offset_day(self.current_date, DAYS_PER_WEEK))

    def previous_week(self) -> None:
        self.go_to(clamp_offset_day(self.current_date, -DAYS_PER_WEEK))

    def zoom_in(self) -> None:
        self.zoom = self.zoom.zoom_in()

    def zoom_out(self) -> None:
        self.zoom = self.zoom.zoom_out()

    def graphs(
        self, reference: date | None = None, zoom: ZoomLevel | None = None
    ) -> list[GraphSeries]:
        """Return weight and waist series, by default for the viewed date and zoom."""
        resolved_date = reference or self.current_date
        resolved_zoom = zoom or self.zoom
        return [
            self.aggregator.graph(resolved_date, resolved_zoom, measurement)
            for measurement in Measurement
        ]

    # Editing

    def begin_edit(self) -> None:
        """Open the current date's entry in three edit buffers."""
        self._require(SessionState.BROWSING, "begin editing")
        try:
            self.save()
        except EntryStoreWriteError:
            logger.exception(
                "Checkpoint before editing failed",
                extra={"date": self.current_date.isoformat()},
            )
        entry = self.current_entry()
        if entry is None:
            self._buffers = {
                edit_field: EditBuffer.create_empty() for edit_field in EditField
            }
        else:
            self._buffers = {
                EditField.CONTENT: EditBuffer.create_from(entry.content, 0),
                EditField.WEIGHT: EditBuffer.create_from(
                    format_measurement(entry.weight_kg), 0
                ),
                EditField.WAIST: EditBuffer.create_from(
                    format_measurement(entry.waist_cm), 0
                ),
            }
        self.active_field = EditField.CONTENT
        self.state = SessionState.EDITING
        logger.debug("Editing entry", extra={"date": self.current_date.isoformat()})

    def next_field(self) -> None:
        if self.state is SessionState.EDITING:
            self.active_field = self.active_field.next()

    def insert_char(self, char: str) -> None:
        """Insert one character into the active buffer.

        Numeric fields keep only digits and a single decimal separator.
        """
        buffer = self._active_buffer()
        if buffer is None:
            return
        if self.active_field.is_numeric and not _accepts_numeric(buffer.to_text(), char):
            return
        buffer.insert_char(char)

    def insert_text(self, text: str) -> None:
        for char in text:
            self.insert_char(char)

    def delete_before(self) -> None:
        self._apply(EditBuffer.delete_before)

    def move_cursor_forward(self) -> None:
        self._apply(EditBuffer.move_cursor_forward)

    def move_cursor_backward(self) -> None:
        self._apply(EditBuffer.move_cursor_backward)

    def field_text(self, edit_field: EditField) -> str:
        buffer = self._buffers.get(edit_field)
        return buffer.to_text() if buffer else ""

    def field_display(self, edit_field: EditField) -> str:
        """Return buffer text, with the cursor marker on the active field only."""
        buffer = self._buffers.get(edit_field)
        if buffer is None:
            return ""
        if edit_field is self.active_field and self.state is SessionState.EDITING:
            return buffer.to_display_text(self.cursor_marker)
        return buffer.to_text()

    def commit(self) -> Entry | None:
        """Store the edited entry and return to browsing.

        Nothing is stored when all three fields are blank; a previously stored
        entry for the date is removed in that case.
        """
        self._require(SessionState.EDITING, "commit")
        entry = Entry(
            date=self.current_date,
            content=self.field_text(EditField.CONTENT),
            weight_kg=parse_measurement(self.field_text(EditField.WEIGHT)),
            waist_cm=parse_measurement(self.field_text(EditField.WAIST)),
        )
        self._end_edit()
        if entry.is_empty:
            removed = self.store.remove(entry.date)
            if removed is not None:
                logger.info("Cleared entry", extra={"date": entry.date.isoformat()})
            self.save()
            return None
        self.store.upsert(entry)
        logger.info("Committed entry", extra={"date": entry.date.isoformat()})
        self.save()
        return entry

    def cancel(self) -> None:
        self._require(SessionState.EDITING, "cancel")
        self.state = SessionState.CONFIRM_DISCARD

    def confirm_discard(self) -> None:
        self._require(SessionState.CONFIRM_DISCARD, "discard changes")
        self._end_edit()
        logger.info("Discarded edit", extra={"date": self.current_date.isoformat()})

    def decline_discard(self) -> None:
        self._require(SessionState.CONFIRM_DISCARD, "resume editing")
        self.state = SessionState.EDITING

    # Persistence

    def save(self) -> None:
        """Write the store through the repository, if one is configured."""
        if self.repository is None:
            return
        self.repository.save(self.store)

    def _end_edit(self) -> None:
        self._buffers = {}
        self.active_field = EditField.CONTENT
        self.state = SessionState.BROWSING

    def _active_buffer(self) -> EditBuffer | None:
        if self.state is not SessionState.EDITING:
            return None
        return self._buffers.get(self.active_field)

    def _apply(self, operation: Callable[[EditBuffer], None]) -> None:
        buffer = self._active_buffer()
        if buffer is not None:
            operation(buffer)

    def _require(self, expected: SessionState, action: str) -> None:
        if self.state is not expected:
            raise InvalidTransitionError(action, self.state.value)


def parse_measurement(text: str) -> float | None:
    """Parse a decimal measurement; blank or malformed input means no value."""
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def _accepts_numeric(current: str, char: str) -> bool:
    if char.isdigit() and char.isascii():
        return True
    if char in DECIMAL_SEPARATORS:
        return not any(existing in DECIMAL_SEPARATORS for existing in current)
    return False
