"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from daylog.api.schemas import (
    CalendarView,
    CursorRequest,
    EditFieldView,
    EditView,
    EntriesView,
    EntryView,
    GoToDateRequest,
    GraphsView,
    GraphView,
    NavigateRequest,
    SessionView,
    TextInputRequest,
    ZoomRequest,
)
from daylog.app_logging import configure_logging
from daylog.containers import AppContainer
from daylog.domain.days import format_day
from daylog.domain.editing import EditField
from daylog.domain.entries import Entry, ZoomLevel, summary_line
from daylog.errors import DaylogError, InvalidTransitionError
from daylog.services.graphs import GraphSeries
from daylog.services.sessions import DiarySession, SessionState

logger = logging.getLogger(__name__)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        interval = state_container.settings.autosave_interval_seconds
        autosave = None
        if interval > 0:
            autosave = asyncio.create_task(_autosave(state_container.session, interval))
        yield
        if autosave is not None:
            autosave.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await autosave
        _save_quietly(state_container.session)

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(DaylogError)
    async def daylog_error(request: Request, exc: DaylogError) -> JSONResponse:
        logger.exception("Diary operation failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )

    def _session(request: Request) -> DiarySession:
        state_container: AppContainer = request.app.state.container
        return state_container.session

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/session")
    async def get_session(request: Request) -> SessionView:
        """Return the current screen."""
        return _session_view(_session(request))

    @app.post("/session/navigate")
    async def navigate(payload: NavigateRequest, request: Request) -> SessionView:
        """Move the viewed date while browsing."""
        session = _session(request)
        actions = {
            "next_day": session.next_day,
            "previous_day": session.previous_day,
            "next_week": session.next_week,
            "previous_week": session.previous_week,
            "today": session.go_to_today,
        }
        actions[payload.direction]()
        return _session_view(session)

    @app.post("/session/date")
    async def go_to_date(payload: GoToDateRequest, request: Request) -> SessionView:
        session = _session(request)
        session.go_to(payload.date)
        return _session_view(session)

    @app.post("/session/zoom")
    async def zoom(payload: ZoomRequest, request: Request) -> SessionView:
        session = _session(request)
        if payload.direction == "in":
            session.zoom_in()
        else:
            session.zoom_out()
        return _session_view(session)

    @app.post("/session/edit")
    async def begin_edit(request: Request) -> SessionView:
        """Open the viewed date's entry for editing."""
        session = _session(request)
        session.begin_edit()
        return _session_view(session)

    @app.post("/session/edit/text")
    async def type_text(payload: TextInputRequest, request: Request) -> SessionView:
        """Type characters into the active field."""
        session = _session(request)
        session.insert_text(payload.text)
        return _session_view(session)

    @app.post("/session/edit/backspace")
    async def backspace(request: Request) -> SessionView:
        session = _session(request)
        session.delete_before()
        return _session_view(session)

    @app.post("/session/edit/cursor")
    async def move_cursor(payload: CursorRequest, request: Request) -> SessionView:
        session = _session(request)
        if payload.direction == "forward":
            session.move_cursor_forward()
        else:
            session.move_cursor_backward()
        return _session_view(session)

    @app.post("/session/edit/next-field")
    async def next_field(request: Request) -> SessionView:
        session = _session(request)
        session.next_field()
        return _session_view(session)

    @app.post("/session/edit/commit")
    async def commit(request: Request) -> SessionView:
        """Store the edited entry and return to browsing."""
        session = _session(request)
        session.commit()
        return _session_view(session)

    @app.post("/session/edit/cancel")
    async def cancel(request: Request) -> SessionView:
        """Ask for confirmation before dropping the edit."""
        session = _session(request)
        session.cancel()
        return _session_view(session)

    @app.post("/session/discard/confirm")
    async def confirm_discard(request: Request) -> SessionView:
        session = _session(request)
        session.confirm_discard()
        return _session_view(session)

    @app.post("/session/discard/decline")
    async def decline_discard(request: Request) -> SessionView:
        session = _session(request)
        session.decline_discard()
        return _session_view(session)

    @app.get("/entries")
    async def list_entries(
        request: Request, start: date | None = None, end: date | None = None
    ) -> EntriesView:
        """Return entries with text in chronological order."""
        session = _session(request)
        entries = [
            entry
            for entry in session.store.with_content()
            if (start is None or entry.date >= start)
            and (end is None or entry.date <= end)
        ]
        return EntriesView(entries=[_entry_view(entry) for entry in entries])

    @app.get("/calendar")
    async def calendar(
        request: Request,
        year: int | None = Query(default=None, ge=1, le=9999),
        month: int | None = Query(default=None, ge=1, le=12),
    ) -> CalendarView:
        """Return the days of a month that have entries."""
        session = _session(request)
        resolved_year = year or session.current_date.year
        resolved_month = month or session.current_date.month
        return CalendarView(
            year=resolved_year,
            month=resolved_month,
            days=session.store.dates_in_month(resolved_year, resolved_month),
        )

    @app.get("/graphs")
    async def graphs(
        request: Request,
        zoom: ZoomLevel | None = None,
        day: date | None = Query(default=None, alias="date"),
    ) -> GraphsView:
        """Return weight and waist series for the viewed date and zoom."""
        session = _session(request)
        reference = day or session.current_date
        series = session.graphs(reference=reference, zoom=zoom)
        return GraphsView(date=reference, graphs=[_graph_view(item) for item in series])

    return app


async def _autosave(session: DiarySession, interval: float) -> None:
    """Save the diary every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        _save_quietly(session)


def _save_quietly(session: DiarySession) -> None:
    try:
        session.save()
    except DaylogError:
        logger.exception("Autosave failed")


def _entry_view(entry: Entry) -> EntryView:
    return EntryView(
        date=entry.date,
        title=format_day(entry.date),
        content=entry.content,
        weight_kg=entry.weight_kg,
        waist_cm=entry.waist_cm,
        summary=summary_line(entry),
    )


def _edit_field_view(session: DiarySession, edit_field: EditField) -> EditFieldView:
    return EditFieldView(
        text=session.field_text(edit_field),
        display=session.field_display(edit_field),
    )


def _session_view(session: DiarySession) -> SessionView:
    entry = session.current_entry()
    edit = None
    if session.state is not SessionState.BROWSING:
        edit = EditView(
            active_field=session.active_field.value,
            content=_edit_field_view(session, EditField.CONTENT),
            weight=_edit_field_view(session, EditField.WEIGHT),
            waist=_edit_field_view(session, EditField.WAIST),
        )
    return SessionView(
        state=session.state.value,
        date=session.current_date,
        title=format_day(session.current_date),
        zoom=session.zoom.value,
        entry=_entry_view(entry) if entry else None,
        edit=edit,
    )


def _graph_view(series: GraphSeries) -> GraphView:
    return GraphView(
        field=series.field.value,
        zoom=series.zoom.value,
        x_max=series.x_max,
        points=series.points,
    )
