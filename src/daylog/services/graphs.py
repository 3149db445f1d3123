"""Graph series for weight and waist measurements."""

from dataclasses import dataclass
from datetime import date

from daylog.domain.days import (
    last_of_month,
    next_day,
    nth_previous_occurrence,
    offset_day,
    shift_months,
)
from daylog.domain.entries import Measurement, ZoomLevel
from daylog.services.entries import EntryStore

GRAPH_POINTS = 8
DAY_POINTS = 8

Point = tuple[float, float]


@dataclass(frozen=True)
class GraphSeries:
    """Points ready for plotting.

    A ``y`` of 0.0 marks a bucket with no sample.
    """

    field: Measurement
    zoom: ZoomLevel
    points: list[Point]

    @property
    def x_max(self) -> float:
        return float(len(self.points))


@dataclass
class Aggregator:
    """Buckets per-day measurements into day, week or month series."""

    store: EntryStore
    graph_points: int = GRAPH_POINTS
    day_points: int = DAY_POINTS

    def series(self, reference: date, zoom: ZoomLevel, field: Measurement) -> list[Point]:
        """Return ``(x, y)`` points for the window ending on ``reference``."""
        if zoom is ZoomLevel.DAY:
            return self._day_points(reference, field)
        if zoom is ZoomLevel.WEEK:
            return self._week_points(reference, field)
        return self._month_points(reference, field)

    def graph(self, reference: date, zoom: ZoomLevel, field: Measurement) -> GraphSeries:
        return GraphSeries(
            field=field, zoom=zoom, points=self.series(reference, zoom, field)
        )

    def weights(self, reference: date, zoom: ZoomLevel) -> list[Point]:
        return self.series(reference, zoom, Measurement.WEIGHT)

    def waists(self, reference: date, zoom: ZoomLevel) -> list[Point]:
        return self.series(reference, zoom, Measurement.WAIST)

    def _day_points(self, reference: date, field: Measurement) -> list[Point]:
        span = self.day_points - 1
        start = offset_day(reference, -span) or date.min
        samples = {
            entry.date: entry.measurement(field)
            for entry in self.store.between(start, reference)
        }
        points = []
        for offset in range(self.day_points):
            day = offset_day(reference, offset - span)
            value = samples.get(day) if day is not None else None
            points.append((float(offset), value if value is not None else 0.0))
        return points

    def _week_points(self, reference: date, field: Measurement) -> list[Point]:
        weekday = reference.weekday()
        points = []
        for x_axis, weeks_back in enumerate(range(self.graph_points, 0, -1)):
            boundary = nth_previous_occurrence(reference, weekday, weeks_back)
            first = next_day(boundary) if boundary is not None else date.min
            if weeks_back > 1:
                last = nth_previous_occurrence(reference, weekday, weeks_back - 1)
            else:
                last = reference
            if last is None:
                points.append((float(x_axis), 0.0))
                continue
            points.append((float(x_axis), self._mean(first, last, field)))
        return points

    def _month_points(self, reference: date, field: Measurement) -> list[Point]:
        points = []
        for x_axis, months_back in enumerate(range(self.graph_points - 1, -1, -1)):
            first = shift_months(reference, -months_back)
            if first is None:
                points.append((float(x_axis), 0.0))
                continue
            last = min(last_of_month(first), reference)
            points.append((float(x_axis), self._mean(first, last, field)))
        return points

    def _mean(self, first: date, last: date, field: Measurement) -> float:
        return _aggregate_mean(
            [entry.measurement(field) for entry in self.store.between(first, last)]
        )


def _aggregate_mean(values: list[float | None]) -> float:
    samples = [value for value in values if value is not None]
    if not samples:
        return 0.0
    return sum(samples) / len(samples)
