"""
Session identity and canonical ordering.

Two records describe the same session when every field of
:class:`SessionIdentity` matches.  Free text (``comments``) is left out on
purpose: a comment edited on the spreadsheet must not turn one session into
two.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple, Optional

from app.schemas.session_record import SessionRecord, TimeSlot
from app.tracker.dates import format_date

# Within a day: morning first, then evening, then unspecified.
SLOT_ORDER: dict[TimeSlot, int] = {
    TimeSlot.MORNING: 0,
    TimeSlot.EVENING: 1,
    TimeSlot.UNSPECIFIED: 2,
}


class SessionIdentity(NamedTuple):
    """Deduplication key of a session record."""

    athlete_name: str
    session_date: str
    time_slot: str
    duration: int
    distance: Optional[int]
    rpe: int
    performance: Optional[int]
    engagement: Optional[int]
    fatigue: Optional[int]


def identity_key(record: SessionRecord) -> SessionIdentity:
    """Return the identity tuple of *record* (comments excluded)."""
    return SessionIdentity(athlete_name=record.athlete_name, session_date=format_date(record.session_date),
                           time_slot=record.time_slot.value, duration=record.duration, distance=record.distance,
                           rpe=record.rpe, performance=record.performance, engagement=record.engagement,
                           fatigue=record.fatigue, )


def _comparable(identity: SessionIdentity) -> tuple:
    # None sorts before any value.
    return tuple((value is not None, value if value is not None else 0) for value in identity)


def canonical_sort_key(record: SessionRecord) -> tuple:
    """Sort key: newest day first, slot order within a day, then identity."""
    return (-record.session_date.toordinal(), SLOT_ORDER[record.time_slot], _comparable(identity_key(record)))


def sort_canonical(records: Iterable[SessionRecord]) -> list[SessionRecord]:
    """Return *records* in canonical order (see :func:`canonical_sort_key`)."""
    return sorted(records, key=canonical_sort_key)
