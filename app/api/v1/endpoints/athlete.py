"""
Athlete identity endpoints.

The athlete name stored on the device; absent means nobody is logged in.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from app.api.dependencies import get_training_log_service
from app.services.training_log_service import TrainingLogService

router = APIRouter()


class AthleteName(BaseModel):
    athlete_name: Optional[str] = Field(None, description="Logged-in athlete, if any")


class AthleteLogin(BaseModel):
    athlete_name: str = Field(..., min_length=1, max_length=200)


@router.get("", summary="Get the logged-in athlete.", response_model=AthleteName)
def get_athlete(service: TrainingLogService = Depends(get_training_log_service)):
    return AthleteName(athlete_name=service.athlete_name())


@router.put("", summary="Set the logged-in athlete.", response_model=AthleteName)
def set_athlete(data: AthleteLogin, service: TrainingLogService = Depends(get_training_log_service)):
    return AthleteName(athlete_name=service.login(data.athlete_name))


@router.delete("", summary="Forget the logged-in athlete (change name).", status_code=status.HTTP_204_NO_CONTENT)
def clear_athlete(service: TrainingLogService = Depends(get_training_log_service)):
    service.logout()
