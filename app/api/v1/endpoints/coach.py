"""
Coach endpoints.

Review any athlete's trends and the remote leaderboard.  Guarded by the
coach password header.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_training_log_service, require_coach
from app.schemas.analytics import DailySeries, KpiSummary, LeaderboardEntry
from app.services.training_log_service import TrainingLogService

router = APIRouter(dependencies=[Depends(require_coach)])


@router.get("/leaderboard", summary="Leaderboard over the last N days.", response_model=list[LeaderboardEntry])
def get_leaderboard(days: int = Query(30, ge=1, le=3650),
                    service: TrainingLogService = Depends(get_training_log_service), ):
    return service.leaderboard(days)


@router.get("/athletes/{athlete_name}/kpis", summary="KPIs for one athlete.", response_model=KpiSummary)
def get_athlete_kpis(athlete_name: str, days: Optional[int] = Query(None, ge=1),
                     service: TrainingLogService = Depends(get_training_log_service), ):
    return service.kpis(days, athlete_name=athlete_name)


@router.get("/athletes/{athlete_name}/series", summary="Daily series for one athlete.", response_model=DailySeries)
def get_athlete_series(athlete_name: str, field: str = Query("rpe"), days: Optional[int] = Query(None, ge=1),
                       service: TrainingLogService = Depends(get_training_log_service), ):
    return service.series(field, days, athlete_name=athlete_name)
