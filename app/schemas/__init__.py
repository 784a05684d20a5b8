"""Pydantic schemas for request/response validation."""

from app.schemas.session_record import (
    SessionRecord,
    SessionResponse,
    TimeSlot,
    parse_record,
)
from app.schemas.analytics import DailySeries, KpiSummary, LeaderboardEntry, SeriesPoint
from app.schemas.sync import FetchResult, SubmitResult, SyncResult

__all__ = [
    "SessionRecord",
    "SessionResponse",
    "TimeSlot",
    "parse_record",
    "DailySeries",
    "KpiSummary",
    "LeaderboardEntry",
    "SeriesPoint",
    "FetchResult",
    "SubmitResult",
    "SyncResult",
]
