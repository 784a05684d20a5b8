"""
Training log service.

Wires the local store, the sync client and the metrics/series projections
into the use cases exposed by the API.  Domain errors become HTTP errors
here; sync failures never do.  They come back as warnings next to data
that is already safely stored.
"""

import datetime
import logging
from typing import Any, Callable, Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.exceptions import StorageError, SyncError, ValidationError
from app.schemas.analytics import DailySeries, KpiSummary, LeaderboardEntry
from app.schemas.session_record import NUMERIC_FIELDS, SessionResponse
from app.schemas.sync import SubmitResult, SyncResult
from app.services.local_store import LocalStore
from app.services.sync_client import SyncClient
from app.tracker.dates import local_today
from app.tracker.export import to_csv, to_json
from app.tracker.metrics import LOAD_FIELD, compute_kpis, filter_athlete
from app.tracker.retention import RetentionPolicy
from app.tracker.series import SeriesBuilder

logger = logging.getLogger(__name__)

SERIES_FIELDS: tuple[str, ...] = NUMERIC_FIELDS + (LOAD_FIELD,)


def series_key(athlete_name: Optional[str], field: str, days: Optional[int]) -> str:
    """Cache key of one chart: ``"<athlete>/<field>/<days>"`` (``*`` for none)."""
    return f"{athlete_name or '*'}/{field}/{days or '*'}"


class TrainingLogService:
    """Service for training log business logic."""

    def __init__(self, session: Session, sync_client: Optional[SyncClient] = None,
                 policy: Optional[RetentionPolicy] = None,
                 today: Callable[[], datetime.date] = local_today,
                 series_builder: Optional[SeriesBuilder] = None, ):
        self.store = LocalStore(session, policy=policy, today=today)
        self.sync_client = sync_client or SyncClient()
        self.series_builder = series_builder or SeriesBuilder()
        self._today = today

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def submit(self, payload: dict[str, Any], user_agent: Optional[str] = None) -> SubmitResult:
        """Store a session locally, then try to send it.

        The stored athlete name takes precedence over the one in *payload*;
        when none is stored yet, the submitted name becomes the stored one.
        """
        data = dict(payload)
        stored_name = self.store.get_athlete_name()
        if stored_name:
            data["athleteName"] = stored_name
            data.pop("athlete_name", None)

        try:
            stored = self.store.add(data)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Session not saved: {e}", )
        except StorageError as e:
            logger.error("Session not saved: %s", e)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                detail="Session not saved: local storage failed", )

        record = stored.record
        if not stored_name:
            self._remember_athlete(record.athlete_name)

        result = SubmitResult(session=SessionResponse.from_record(record), saved_locally=stored.retained)
        try:
            self.sync_client.push(record, user_agent=user_agent)
            result.synced = True
        except SyncError as e:
            logger.warning("Session not sent: %s", e)
            sync_warning = f"not sent: {e}"
        else:
            sync_warning = None

        if stored.retained:
            if sync_warning:
                result.warning = f"Saved locally but {sync_warning}"
        else:
            cutoff = self.store.policy.cutoff(self._today())
            if cutoff and record.session_date < cutoff:
                reason = f"older than {cutoff.isoformat()}"
            else:
                reason = "older than every stored session and the store is full"
            status_text = f"but {sync_warning}" if sync_warning else "(sent to the remote log)"
            result.warning = f"Not saved locally: session is {reason} {status_text}"
        return result

    def refresh_from_remote(self, athlete_name: Optional[str] = None, limit: Optional[int] = None) -> SyncResult:
        """Fetch the athlete's remote sessions and merge them into the store."""
        name = (athlete_name or self.store.get_athlete_name() or "").strip()
        if not name:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="No athlete name given and nobody is logged in", )

        try:
            fetched = self.sync_client.fetch(name, limit)
        except SyncError as e:
            logger.warning("Fetch for %s failed: %s", name, e)
            return SyncResult(ok=False, athlete_name=name, total=len(self.store.load()), warning=str(e))

        try:
            merged = self.store.merge_in(fetched.records)
        except StorageError as e:
            logger.error("Fetched sessions not saved: %s", e)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                detail="Fetched sessions could not be saved locally", )

        return SyncResult(ok=True, athlete_name=name, fetched=len(fetched.records), dropped=fetched.dropped,
                          total=len(merged), )

    def list_sessions(self, athlete_name: Optional[str] = None, days: Optional[int] = None, ) -> list[SessionResponse]:
        records = self.store.query(athlete_name, days)
        return [SessionResponse.from_record(r) for r in records]

    def clear(self, confirm: bool) -> None:
        if not confirm:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="Clearing every session requires confirm=true", )
        try:
            self.store.clear()
        except StorageError as e:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    def export_csv(self, athlete_name: Optional[str] = None) -> str:
        return to_csv(self.store.query(athlete_name))

    def export_json(self, athlete_name: Optional[str] = None) -> str:
        return to_json(self.store.query(athlete_name))

    # ------------------------------------------------------------------
    # Athlete identity
    # ------------------------------------------------------------------

    def athlete_name(self) -> Optional[str]:
        return self.store.get_athlete_name()

    def login(self, name: str) -> str:
        try:
            return self.store.set_athlete_name(name)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        except StorageError as e:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    def logout(self) -> None:
        try:
            self.store.clear_athlete_name()
        except StorageError as e:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def kpi_range(self) -> int:
        return self.store.get_kpi_range_days()

    def set_kpi_range(self, days: int) -> int:
        try:
            return self.store.set_kpi_range_days(days)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        except StorageError as e:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    def kpis(self, days: Optional[int] = None, athlete_name: Optional[str] = None) -> KpiSummary:
        """KPI panel; window defaults to the stored range, athlete to the logged-in one."""
        window = days if days is not None else self.store.get_kpi_range_days()
        name = athlete_name or self.store.get_athlete_name()
        try:
            return compute_kpis(self.store.load(), window, name, self._today())
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    def series(self, field: str, days: Optional[int] = None, athlete_name: Optional[str] = None) -> DailySeries:
        """Daily average of *field* for the chart."""
        if field not in SERIES_FIELDS:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail=f"Unknown field '{field}'. Available: {list(SERIES_FIELDS)}", )
        name = athlete_name or self.store.get_athlete_name()
        records = filter_athlete(self.store.load(), name)
        try:
            points = self.series_builder.rebuild(records, field, days, self._today(),
                                                 key=series_key(name, field, days), )
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        return DailySeries(athlete_name=name, field=field, days=days, points=points)

    def leaderboard(self, days: int) -> list[LeaderboardEntry]:
        try:
            return self.sync_client.hall(days)
        except SyncError as e:
            logger.warning("Leaderboard unavailable: %s", e)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Leaderboard unavailable: {e}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _remember_athlete(self, name: str) -> None:
        try:
            self.store.set_athlete_name(name)
        except StorageError as e:
            logger.warning("Could not remember athlete name %r: %s", name, e)
