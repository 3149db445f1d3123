"""Pydantic models for the diary HTTP API."""

import datetime
from typing import Literal

from pydantic import BaseModel


class NavigateRequest(BaseModel):
    """Date navigation request."""

    direction: Literal["next_day", "previous_day", "next_week", "previous_week", "today"]


class GoToDateRequest(BaseModel):
    """Jump to an explicit date."""

    date: datetime.date


class ZoomRequest(BaseModel):
    """Graph zoom request."""

    direction: Literal["in", "out"]


class TextInputRequest(BaseModel):
    """Characters typed into the active field."""

    text: str


class CursorRequest(BaseModel):
    """Cursor movement within the active field."""

    direction: Literal["forward", "backward"]


class EntryView(BaseModel):
    """One diary entry."""

    date: datetime.date
    title: str
    content: str
    weight_kg: float | None
    waist_cm: float | None
    summary: str


class EditFieldView(BaseModel):
    """One edit buffer as text and with its cursor marker."""

    text: str
    display: str


class EditView(BaseModel):
    """Buffers of the entry being edited."""

    active_field: str
    content: EditFieldView
    weight: EditFieldView
    waist: EditFieldView


class SessionView(BaseModel):
    """Current session screen."""

    state: str
    date: datetime.date
    title: str
    zoom: str
    entry: EntryView | None
    edit: EditView | None


class GraphView(BaseModel):
    """Plot-ready series for one measurement."""

    field: str
    zoom: str
    x_max: float
    points: list[tuple[float, float]]


class GraphsView(BaseModel):
    """Weight and waist series for one date."""

    date: datetime.date
    graphs: list[GraphView]


class EntriesView(BaseModel):
    """Chronological list of entries with text."""

    entries: list[EntryView]


class CalendarView(BaseModel):
    """Days of a month that have entries."""

    year: int
    month: int
    days: list[datetime.date]
