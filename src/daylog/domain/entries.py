"""Domain models for diary entries."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import total_ordering


class Measurement(Enum):
    """Numeric series recorded alongside an entry."""

    WEIGHT = "weight"
    WAIST = "waist"


@total_ordering
class ZoomLevel(Enum):
    """Graph bucketing granularity, ordered day < week < month."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ZoomLevel):
            return NotImplemented
        order = list(ZoomLevel)
        return order.index(self) < order.index(other)

    def zoom_out(self) -> "ZoomLevel":
        """Return the next coarser level; month is the coarsest."""
        order = list(ZoomLevel)
        return order[min(order.index(self) + 1, len(order) - 1)]

    def zoom_in(self) -> "ZoomLevel":
        """Return the next finer level; day is the finest."""
        order = list(ZoomLevel)
        return order[max(order.index(self) - 1, 0)]


@dataclass(frozen=True)
class Entry:
    """One day's text and optional measurements."""

    date: date
    content: str = ""
    weight_kg: float | None = None
    waist_cm: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.content and self.weight_kg is None and self.waist_cm is None

    def measurement(self, field: Measurement) -> float | None:
        """Return the value recorded for ``field``, if any."""
        if field is Measurement.WEIGHT:
            return self.weight_kg
        return self.waist_cm


def format_measurement(value: float | None) -> str:
    """Render a measurement for editing; absent values become empty text."""
    if value is None:
        return ""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def summary_line(entry: Entry) -> str:
    """Render the ``"80.5 kg, -- cm"`` line shown above an entry."""
    weight = format_measurement(entry.weight_kg) or "--"
    waist = format_measurement(entry.waist_cm) or "--"
    return f"{weight} kg, {waist} cm"
