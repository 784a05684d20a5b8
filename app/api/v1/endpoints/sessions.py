"""
Session endpoints.

Logging, listing, syncing, exporting and clearing training sessions.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, Query, Response, status

from app.api.dependencies import get_training_log_service
from app.schemas.session_record import SessionResponse
from app.schemas.sync import SubmitResult, SyncResult
from app.services.training_log_service import TrainingLogService

router = APIRouter()


@router.post("", summary="Log a training session.", response_model=SubmitResult, status_code=status.HTTP_201_CREATED, )
def submit_session(payload: dict[str, Any] = Body(..., description="Session fields (camelCase)"),
                   user_agent: Optional[str] = Header(None),
                   service: TrainingLogService = Depends(get_training_log_service), ):
    return service.submit(payload, user_agent=user_agent)


@router.get("", summary="List stored sessions, newest first.", response_model=list[SessionResponse], )
def list_sessions(athlete: Optional[str] = Query(None, description="Only this athlete's sessions"),
                  days: Optional[int] = Query(None, ge=1, description="Trailing window in days"),
                  service: TrainingLogService = Depends(get_training_log_service), ):
    return service.list_sessions(athlete, days)


@router.delete("", summary="Delete every stored session.", status_code=status.HTTP_204_NO_CONTENT, )
def clear_sessions(confirm: bool = Query(False, description="Must be true"),
                   service: TrainingLogService = Depends(get_training_log_service), ):
    service.clear(confirm)


@router.post("/sync", summary="Fetch remote sessions and merge them locally.", response_model=SyncResult, )
def sync_sessions(athlete: Optional[str] = Query(None, description="Defaults to the logged-in athlete"),
                  limit: Optional[int] = Query(None, ge=1, le=5000),
                  service: TrainingLogService = Depends(get_training_log_service), ):
    return service.refresh_from_remote(athlete, limit)


@router.get("/export.csv", summary="Export sessions as CSV.")
def export_csv(athlete: Optional[str] = Query(None),
               service: TrainingLogService = Depends(get_training_log_service), ):
    return Response(content=service.export_csv(athlete), media_type="text/csv; charset=utf-8",
                    headers={"Content-Disposition": 'attachment; filename="training_sessions.csv"'}, )


@router.get("/export.json", summary="Export sessions as JSON.")
def export_json(athlete: Optional[str] = Query(None),
                service: TrainingLogService = Depends(get_training_log_service), ):
    return Response(content=service.export_json(athlete), media_type="application/json",
                    headers={"Content-Disposition": 'attachment; filename="training_sessions.json"'}, )
