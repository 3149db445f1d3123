"""Tests for the diary session state machine."""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import pytest

from daylog.domain.editing import EditField
from daylog.domain.entries import Entry, Measurement, ZoomLevel
from daylog.errors import EntryStoreWriteError, InvalidTransitionError
from daylog.services.entries import EntryRepository, EntryStore
from daylog.services.sessions import DiarySession, SessionState, parse_measurement


def test_session_starts_browsing_today(session: DiarySession, today: date) -> None:
    assert session.state is SessionState.BROWSING
    assert session.current_date == today
    assert session.zoom is ZoomLevel.DAY
    assert session.current_entry() is None


def test_begin_edit_without_entry_yields_empty_buffers(session: DiarySession) -> None:
    session.begin_edit()

    assert session.state is SessionState.EDITING
    assert session.active_field is EditField.CONTENT
    for edit_field in EditField:
        assert session.field_text(edit_field) == ""


def test_commit_with_nothing_entered_stores_nothing(
    session: DiarySession, entry_repository
) -> None:
    session.begin_edit()

    assert session.commit() is None
    assert session.state is SessionState.BROWSING
    assert len(session.store) == 0
    assert entry_repository.entries == []


def test_full_edit_flow_commits_entry(
    session: DiarySession, entry_repository, today: date
) -> None:
    session.begin_edit()
    session.insert_text("Went running")
    session.next_field()
    session.insert_text("80.5")
    session.next_field()
    session.insert_text("9x0")

    entry = session.commit()

    assert entry == Entry(
        date=today, content="Went running", weight_kg=80.5, waist_cm=90.0
    )
    assert session.current_entry() == entry
    assert entry_repository.entries == [entry]


def test_numeric_fields_accept_one_decimal_separator(session: DiarySession) -> None:
    session.begin_edit()
    session.next_field()
    session.insert_text("8.0.5kg")

    assert session.field_text(EditField.WEIGHT) == "8.05"

    session.next_field()
    session.insert_text("7,5,")

    assert session.field_text(EditField.WAIST) == "7,5"

    entry = session.commit()

    assert entry is not None
    assert entry.weight_kg == 8.05
    assert entry.waist_cm == 7.5


def test_lone_separator_is_treated_as_absent(session: DiarySession) -> None:
    session.begin_edit()
    session.insert_text("note")
    session.next_field()
    session.insert_char(".")

    entry = session.commit()

    assert entry is not None
    assert entry.weight_kg is None


def test_begin_edit_hydrates_existing_entry(session: DiarySession, today: date) -> None:
    session.store.upsert(Entry(date=today, content="hello", weight_kg=80.0))

    session.begin_edit()

    assert session.field_text(EditField.CONTENT) == "hello"
    assert session.field_text(EditField.WEIGHT) == "80"
    assert session.field_text(EditField.WAIST) == ""
    assert session.field_display(EditField.CONTENT) == "hello█"
    assert session.field_display(EditField.WEIGHT) == "80"


def test_cursor_movement_applies_to_active_field(
    session: DiarySession, today: date
) -> None:
    session.store.upsert(Entry(date=today, content="helo", waist_cm=91.0))
    session.begin_edit()

    session.move_cursor_backward()
    session.insert_char("l")
    session.move_cursor_forward()
    session.next_field()
    session.next_field()
    session.delete_before()

    assert session.field_text(EditField.CONTENT) == "hello"
    assert session.field_text(EditField.WAIST) == "9"
    assert session.field_display(EditField.WAIST) == "9█"


def test_clearing_existing_entry_removes_it(session: DiarySession, today: date) -> None:
    session.store.upsert(Entry(date=today, content="x"))
    session.begin_edit()
    session.delete_before()

    assert session.commit() is None
    assert session.store.get(today) is None


def test_cancel_then_decline_keeps_buffers(session: DiarySession) -> None:
    session.begin_edit()
    session.insert_text("draft")

    session.cancel()
    assert session.state is SessionState.CONFIRM_DISCARD

    session.decline_discard()
    assert session.state is SessionState.EDITING
    assert session.field_text(EditField.CONTENT) == "draft"


def test_confirm_discard_drops_changes(session: DiarySession, today: date) -> None:
    session.store.upsert(Entry(date=today, content="kept"))
    session.begin_edit()
    session.insert_text(" and more")
    session.cancel()

    session.confirm_discard()

    assert session.state is SessionState.BROWSING
    assert session.current_entry() == Entry(date=today, content="kept")
    assert session.field_text(EditField.CONTENT) == ""


def test_invalid_transitions_raise(session: DiarySession) -> None:
    with pytest.raises(InvalidTransitionError):
        session.commit()
    with pytest.raises(InvalidTransitionError):
        session.cancel()

    session.begin_edit()

    with pytest.raises(InvalidTransitionError):
        session.begin_edit()
    with pytest.raises(InvalidTransitionError):
        session.confirm_discard()


def test_input_while_browsing_is_ignored(session: DiarySession) -> None:
    session.insert_char("a")
    session.delete_before()
    session.move_cursor_backward()
    session.next_field()

    assert session.state is SessionState.BROWSING
    assert session.active_field is EditField.CONTENT


def test_navigation_moves_current_date(session: DiarySession) -> None:
    session.next_day()
    assert session.current_date == date(2024, 3, 14)

    session.previous_week()
    assert session.current_date == date(2024, 3, 7)

    session.next_week()
    session.previous_day()
    assert session.current_date == date(2024, 3, 13)

    session.go_to(date(2023, 1, 1))
    session.go_to_today()
    assert session.current_date == date(2024, 3, 13)


def test_navigation_is_ignored_while_editing(session: DiarySession) -> None:
    session.begin_edit()

    session.next_day()

    assert session.current_date == date(2024, 3, 13)


def test_zoom_transitions(session: DiarySession) -> None:
    session.zoom_out()
    session.zoom_out()
    session.zoom_out()
    assert session.zoom is ZoomLevel.MONTH

    session.zoom_in()
    assert session.zoom is ZoomLevel.WEEK


def test_commit_and_begin_edit_save_through_repository(
    session: DiarySession, entry_repository
) -> None:
    session.begin_edit()
    session.insert_text("saved")
    session.commit()

    assert entry_repository.saves == 2
    assert [entry.content for entry in entry_repository.entries] == ["saved"]


def test_graphs_follow_current_date_and_zoom(session: DiarySession, today: date) -> None:
    session.store.upsert(Entry(date=today, weight_kg=80.0, waist_cm=90.0))
    session.zoom_out()

    weight, waist = session.graphs()

    assert weight.field is Measurement.WEIGHT
    assert weight.zoom is ZoomLevel.WEEK
    assert weight.points[7] == (7.0, 80.0)
    assert waist.points[7] == (7.0, 90.0)


def test_parse_measurement() -> None:
    assert parse_measurement("80.5") == 80.5
    assert parse_measurement("80,5") == 80.5
    assert parse_measurement("  ") is None
    assert parse_measurement("abc") is None


def test_navigation_stops_at_representable_bounds(session: DiarySession) -> None:
    session.go_to(date(9999, 12, 28))
    session.next_week()
    assert session.current_date == date.max
    session.next_day()
    assert session.current_date == date.max

    session.go_to(date(1, 1, 4))
    session.previous_week()
    assert session.current_date == date.min
    session.previous_day()
    assert session.current_date == date.min


@dataclass
class FailingEntryRepository(EntryRepository):
    """Repository whose writes always fail."""

    def load(self) -> EntryStore:
        return EntryStore()

    def save(self, store: EntryStore) -> None:
        raise EntryStoreWriteError(Path("diary.json"), "disk full")


def test_begin_edit_opens_editor_when_checkpoint_fails(
    caplog: pytest.LogCaptureFixture,
) -> None:
    session = DiarySession(
        store=EntryStore(),
        clock=lambda: date(2024, 3, 13),
        repository=FailingEntryRepository(),
    )

    session_logger = logging.getLogger("daylog.services.sessions")
    session_logger.addHandler(caplog.handler)
    try:
        session.begin_edit()
    finally:
        session_logger.removeHandler(caplog.handler)

    assert session.state is SessionState.EDITING
    assert "Checkpoint before editing failed" in caplog.text

    session.insert_text("draft")
    with pytest.raises(EntryStoreWriteError):
        session.commit()
