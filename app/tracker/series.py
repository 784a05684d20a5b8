"""
Daily series for charts.

Irregular sessions are bucketed by calendar day: each day becomes a single
point holding the mean of that day's finite values, and days without any
finite value are left out.  Points are ascending by date.

Values are passed through as-is (ratings outside 1-10 are not clamped);
range handling belongs to whatever renders the series.

:class:`SeriesBuilder` keeps the last series built per key and notifies
subscribers only when a rebuild actually changes it.  A chart subscribes
instead of polling or redrawing on every resize.
"""

from __future__ import annotations

import datetime
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Iterable, Optional

from app.schemas.analytics import SeriesPoint
from app.tracker.metrics import finite_number, field_value, record_day, window_filter

logger = logging.getLogger(__name__)

SeriesListener = Callable[[str, list[SeriesPoint]], None]


def daily_average(records: Iterable[Any], field: str, days: Optional[int] = None,
                  today: Optional[datetime.date] = None, ) -> list[SeriesPoint]:
    """Mean of *field* per calendar day, ascending.

    Args:
        records: Records already filtered by athlete.
        field: Numeric field name (``load`` allowed).
        days: Optional trailing window; ``None`` keeps every record.
        today: Reference day for the window.

    Returns:
        One :class:`SeriesPoint` per day that has at least one finite value.
    """
    if days is not None:
        records = window_filter(records, days, today)

    buckets: dict[datetime.date, list[float]] = defaultdict(list)
    for record in records:
        day = record_day(record)
        value = finite_number(field_value(record, field))
        if day is None or value is None:
            continue
        buckets[day].append(value)

    return [SeriesPoint(date=day, value=sum(values) / len(values)) for day, values in sorted(buckets.items())]


class SeriesBuilder:
    """Builds daily series and publishes them to subscribers on change."""

    def __init__(self) -> None:
        self._series: dict[str, list[SeriesPoint]] = {}
        self._listeners: list[SeriesListener] = []
        # Shared across request threads; listeners may call back into current().
        self._lock = threading.RLock()

    def subscribe(self, listener: SeriesListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def current(self, key: str) -> list[SeriesPoint]:
        with self._lock:
            return list(self._series.get(key, []))

    def rebuild(self, records: Iterable[Any], field: str, days: Optional[int] = None,
                today: Optional[datetime.date] = None, key: Optional[str] = None, ) -> list[SeriesPoint]:
        """Recompute a series; notify listeners if it changed.

        *key* names the cached series (defaults to *field*), so one builder can
        track several athletes or windows.  Listeners receive the key.
        """
        series_key = key or field
        points = daily_average(records, field, days, today)
        with self._lock:
            if points == self._series.get(series_key):
                return points

            self._series[series_key] = points
            listeners = list(self._listeners)
            for listener in listeners:
                try:
                    listener(series_key, list(points))
                except Exception:
                    logger.exception("Series listener %r failed for %s", listener, series_key)
        return points
