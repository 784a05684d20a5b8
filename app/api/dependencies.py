"""
Shared API dependencies.

Reusable FastAPI dependencies for service construction and the coach gate.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from app.core.config import settings
from app.db.session import get_db
from app.services.sync_client import SyncClient
from app.services.training_log_service import TrainingLogService
from app.tracker.series import SeriesBuilder

logger = logging.getLogger(__name__)


@lru_cache
def get_sync_client() -> SyncClient:
    """One client (and one HTTP connection pool) per process."""
    return SyncClient()


def _log_series_change(key: str, points: list) -> None:
    logger.debug("Series %s changed (%d points)", key, len(points))


@lru_cache
def get_series_builder() -> SeriesBuilder:
    """One builder per process, so change detection spans requests."""
    builder = SeriesBuilder()
    builder.subscribe(_log_series_change)
    return builder


def get_training_log_service(db: Session = Depends(get_db),
                             sync_client: SyncClient = Depends(get_sync_client),
                             series_builder: SeriesBuilder = Depends(get_series_builder), ) -> TrainingLogService:
    return TrainingLogService(db, sync_client=sync_client, series_builder=series_builder)


def require_coach(x_coach_password: Optional[str] = Header(None)) -> None:
    """Gate the coach views behind the shared coach password.

    This only switches views; it is not an access-control mechanism.
    """
    if not settings.COACH_PASSWORD:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Coach view is disabled")
    if x_coach_password != settings.COACH_PASSWORD:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Wrong coach password")
