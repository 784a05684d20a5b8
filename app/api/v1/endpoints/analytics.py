"""
Analytics endpoints: KPI panel, daily series and KPI window selection.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.api.dependencies import get_training_log_service
from app.schemas.analytics import DailySeries, KpiSummary
from app.services.training_log_service import TrainingLogService

router = APIRouter()


class KpiRange(BaseModel):
    days: int


@router.get(
    "/kpis",
    summary="Get windowed KPIs for the logged-in athlete.",
    response_model=KpiSummary,
)
def get_kpis(
    days: Optional[int] = Query(None, ge=1, description="Window in days (defaults to the stored range)"),
    service: TrainingLogService = Depends(get_training_log_service),
):
    return service.kpis(days)


@router.get(
    "/series",
    summary="Get the daily average of one field.",
    response_model=DailySeries,
)
def get_series(
    field: str = Query("rpe", description="rpe, performance, engagement, fatigue, duration, distance or load"),
    days: Optional[int] = Query(None, ge=1, description="Trailing window in days (all history if omitted)"),
    service: TrainingLogService = Depends(get_training_log_service),
):
    return service.series(field, days)


@router.get(
    "/range",
    summary="Get the selected KPI window.",
    response_model=KpiRange,
)
def get_range(service: TrainingLogService = Depends(get_training_log_service)):
    return KpiRange(days=service.kpi_range())


@router.put(
    "/range",
    summary="Select the KPI window (7, 30 or 365 days).",
    response_model=KpiRange,
)
def set_range(data: KpiRange, service: TrainingLogService = Depends(get_training_log_service)):
    return KpiRange(days=service.set_kpi_range(data.days))
