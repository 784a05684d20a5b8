"""
Windowed training metrics.

Pure functions over a list of records that the caller has already narrowed
to one athlete and one date window (see :func:`filter_athlete` and
:func:`window_filter`).  Values that are missing or not finite numbers are
skipped everywhere, so an aggregate is never NaN and an empty selection
never divides by zero.

``load`` is accepted as a field name and resolves to ``duration × rpe``.
"""

from __future__ import annotations

import datetime
import math
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence, Union

from app.schemas.analytics import KpiSummary
from app.schemas.session_record import SessionRecord
from app.tracker.dates import local_today, normalize_date

Number = Union[int, float]

LOAD_FIELD = "load"


def field_value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        if field == LOAD_FIELD and LOAD_FIELD not in record:
            return _product(record.get("duration"), record.get("rpe"))
        return record.get(field)
    return getattr(record, field, None)


def finite_number(value: Any) -> Optional[Number]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def _product(duration: Any, rpe: Any) -> Optional[Number]:
    d, r = finite_number(duration), finite_number(rpe)
    if d is None or r is None:
        return None
    return d * r


def finite_values(records: Iterable[Any], field: str) -> list[Number]:
    """All finite numeric values of *field* across *records*."""
    values = []
    for record in records:
        value = finite_number(field_value(record, field))
        if value is not None:
            values.append(value)
    return values


def average(records: Iterable[Any], field: str) -> Optional[float]:
    """Arithmetic mean of the finite values of *field*, ``None`` if there are none."""
    values = finite_values(records, field)
    if not values:
        return None
    return sum(values) / len(values)


def total(records: Iterable[Any], field: str) -> Number:
    """Sum of the finite values of *field*, ``0`` if there are none."""
    return sum(finite_values(records, field))


def total_load(records: Iterable[Any]) -> Number:
    """Sum of per-record ``duration × rpe`` (records missing either count 0)."""
    loads = (_product(field_value(r, "duration"), field_value(r, "rpe")) for r in records)
    return sum(load for load in loads if load is not None)


def record_day(record: Any) -> Optional[datetime.date]:
    if isinstance(record, Mapping):
        return normalize_date(record.get("sessionDate", record.get("session_date")))
    return normalize_date(getattr(record, "session_date", None))


def window_filter(records: Iterable[Any], days: int, today: Optional[datetime.date] = None) -> list[Any]:
    """Records dated within ``[today - days, today]`` (both ends inclusive).

    Records whose date does not normalise are excluded.

    Raises:
        ValueError: If *days* is not a positive integer.
    """
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise ValueError(f"days must be a positive integer, got {days!r}")

    end = today or local_today()
    start = end - datetime.timedelta(days=days)
    selected = []
    for record in records:
        day = record_day(record)
        if day is not None and start <= day <= end:
            selected.append(record)
    return selected


def filter_athlete(records: Iterable[SessionRecord], athlete_name: Optional[str]) -> list[SessionRecord]:
    """Records belonging to *athlete_name* (every record if it is ``None``)."""
    if athlete_name is None:
        return list(records)
    name = athlete_name.strip()
    return [r for r in records if r.athlete_name == name]


def _rounded(value: Optional[float]) -> Optional[float]:
    return round(value, 2) if value is not None else None


def compute_kpis(records: Sequence[SessionRecord], days: int, athlete_name: Optional[str] = None,
                 today: Optional[datetime.date] = None, ) -> KpiSummary:
    """Compute the KPI panel for one window.

    Args:
        records: Full collection (filtered here by athlete and window).
        days: Window length.
        athlete_name: Optional athlete filter.
        today: Reference day (defaults to today).

    Returns:
        :class:`KpiSummary` with totals and rounded averages.
    """
    end = today or local_today()
    selected = window_filter(filter_athlete(records, athlete_name), days, end)

    return KpiSummary(athlete_name=athlete_name, days=days, start=end - datetime.timedelta(days=days), end=end,
                      session_count=len(selected), total_duration=total(selected, "duration"),
                      total_distance=total(selected, "distance"), total_load=total_load(selected),
                      avg_rpe=_rounded(average(selected, "rpe")),
                      avg_performance=_rounded(average(selected, "performance")),
                      avg_engagement=_rounded(average(selected, "engagement")),
                      avg_fatigue=_rounded(average(selected, "fatigue")),
                      avg_load=_rounded(average(selected, LOAD_FIELD)), )
