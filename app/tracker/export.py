"""
CSV and JSON export of session records.

Column order is fixed so spreadsheets built on the export keep working:
the identity fields, then the derived load, then the comments.  Newlines
inside comments are flattened to spaces.
"""

import csv
import io
import json
from typing import Iterable

from app.schemas.session_record import SessionRecord
from app.tracker.dates import format_date

CSV_COLUMNS: list[str] = ["athleteName", "sessionDate", "timeSlot", "duration", "distance", "rpe", "performance",
                          "engagement", "fatigue", "load", "comments", ]


def _cell(value: object) -> object:
    return "" if value is None else value


def _flatten(text: str) -> str:
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def to_csv(records: Iterable[SessionRecord]) -> str:
    """Header row plus one row per record."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for r in records:
        writer.writerow([r.athlete_name, format_date(r.session_date), r.time_slot.value, r.duration,
                         _cell(r.distance), r.rpe, _cell(r.performance), _cell(r.engagement), _cell(r.fatigue),
                         r.load, _flatten(r.comments), ])
    return buffer.getvalue()


def to_json(records: Iterable[SessionRecord]) -> str:
    """Pretty-printed JSON array of the records in wire format."""
    return json.dumps([r.to_wire() for r in records], indent=2, ensure_ascii=False)
