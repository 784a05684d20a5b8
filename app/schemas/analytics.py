"""
Analytics schemas: KPI summaries, daily series and the coach leaderboard.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class KpiSummary(BaseModel):
    """Windowed aggregates for one athlete (or all athletes)."""

    athlete_name: Optional[str] = Field(None, description="Athlete filter (None = every athlete)")
    days: int = Field(..., description="Window length in days")
    start: datetime.date = Field(..., description="First day of the window (inclusive)")
    end: datetime.date = Field(..., description="Last day of the window (inclusive)")
    session_count: int
    total_duration: float = Field(..., description="Minutes")
    total_distance: float = Field(..., description="Meters")
    total_load: float = Field(..., description="Sum of duration × rpe")
    avg_rpe: Optional[float] = None
    avg_performance: Optional[float] = None
    avg_engagement: Optional[float] = None
    avg_fatigue: Optional[float] = None
    avg_load: Optional[float] = Field(None, description="Mean load per session")


class SeriesPoint(BaseModel):
    """One day of a daily series."""

    date: datetime.date
    value: float


class DailySeries(BaseModel):
    """Daily average of one field, ascending by date."""

    athlete_name: Optional[str] = None
    field: str
    days: Optional[int] = None
    points: list[SeriesPoint] = Field(default_factory=list)


class LeaderboardEntry(BaseModel):
    """One athlete row of the remote ``hall`` query."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    athlete_name: str = Field(..., min_length=1)
    distance_total: float = Field(0.0, ge=0.0)
    performance_avg: Optional[float] = None
    engagement_avg: Optional[float] = None
    sessions_count: int = Field(0, ge=0)
