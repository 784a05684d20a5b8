"""
Calendar-date normalisation.

Session dates reach the tracker in several shapes: ISO dates typed into the
form, day-first dates copied from a spreadsheet, and full timestamps echoed
back by the remote web app.  Everything is reduced to a ``datetime.date``
before it is compared, stored or grouped, so two spellings of the same day
can never be treated as distinct sessions.

Resolution order
----------------

1. ``YYYY-MM-DD``
2. ``DD/MM/YYYY`` or ``DD-MM-YYYY`` (day first)
3. generic parsing: ISO datetimes (with or without offset) through pydantic,
   then a handful of textual formats.

Timestamps with an offset are moved to the configured zone before the time
of day is discarded.  :func:`normalize_date` is total: anything that does
not resolve to a real calendar day yields ``None``.
"""

from __future__ import annotations

import datetime
import logging
import re
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DAY_FIRST = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")

_TEXT_FORMATS: tuple[str, ...] = ("%Y/%m/%d", "%d.%m.%Y", "%d %B %Y", "%d %b %Y", "%B %d, %Y", "%b %d, %Y",
                                  "%a %b %d %Y", "%a, %d %b %Y %H:%M:%S GMT", )

_DATETIME_ADAPTER = TypeAdapter(datetime.datetime)


def _zone(tz: Optional[datetime.tzinfo]) -> datetime.tzinfo:
    if tz is not None:
        return tz
    try:
        return ZoneInfo(settings.TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown TIMEZONE %r, falling back to UTC", settings.TIMEZONE)
        return datetime.timezone.utc


def _calendar_day(value: datetime.datetime, tz: Optional[datetime.tzinfo]) -> datetime.date:
    if value.tzinfo is not None:
        value = value.astimezone(_zone(tz))
    return value.date()


def _build(year: int, month: int, day: int) -> Optional[datetime.date]:
    try:
        return datetime.date(year, month, day)
    except ValueError:
        return None


def _parse_generic(text: str, tz: Optional[datetime.tzinfo]) -> Optional[datetime.date]:
    # Bare digit strings would otherwise be read as unix timestamps.
    if text.isdigit():
        return None

    try:
        return _calendar_day(_DATETIME_ADAPTER.validate_python(text), tz)
    except (PydanticValidationError, OverflowError):
        pass

    for fmt in _TEXT_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(value: object, tz: Optional[datetime.tzinfo] = None) -> Optional[datetime.date]:
    """Reduce *value* to a calendar day, or ``None`` if it is not a valid date.

    Args:
        value: A string, ``date`` or ``datetime``.  Anything else is invalid.
        tz: Zone used to attribute offset-aware timestamps to a day
            (defaults to ``settings.TIMEZONE``).

    Returns:
        The calendar day, or ``None``.  Never raises.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime.datetime):
        return _calendar_day(value, tz)
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = _ISO_DATE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _build(year, month, day)

    match = _DAY_FIRST.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        return _build(year, month, day)

    return _parse_generic(text, tz)


def local_today(tz: Optional[datetime.tzinfo] = None) -> datetime.date:
    """Current calendar day in *tz* (defaults to ``settings.TIMEZONE``).

    Windows and retention edges use this day, so they agree with the day
    timestamps are attributed to by :func:`normalize_date`.
    """
    return datetime.datetime.now(_zone(tz)).date()


def format_date(value: datetime.date) -> str:
    """Canonical ``YYYY-MM-DD`` key for display and grouping."""
    return value.isoformat()
