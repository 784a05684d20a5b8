"""
Local session store.

Owns the canonical session collection persisted under the ``sessions`` key,
plus the two small pieces of per-device state (``athleteName`` and
``kpiRangeDays``).  Callers receive copies; every change to the collection
goes through :func:`app.tracker.reconciler.merge` or :meth:`LocalStore.clear`.

Reads never fail: a corrupt or unreadable collection is logged and treated
as empty.  Writes that fail raise :class:`StorageError` so the caller can
report "not saved".

FastAPI runs sync endpoints on a thread pool, so every load-modify-save of
the collection holds a process-wide lock.
"""

import datetime
import json
import logging
import threading
from typing import Any, Callable, Iterable, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.config import settings
from app.core.exceptions import StorageError, ValidationError
from app.db.repositories.key_value import KeyValueRepository
from app.schemas.session_record import SessionRecord, parse_record
from app.tracker.dates import local_today
from app.tracker.identity import identity_key
from app.tracker.metrics import filter_athlete, window_filter
from app.tracker.reconciler import merge
from app.tracker.retention import RetentionPolicy, apply_retention

logger = logging.getLogger(__name__)

SESSIONS_KEY = "sessions"
ATHLETE_NAME_KEY = "athleteName"
KPI_RANGE_KEY = "kpiRangeDays"

STORE_LOCK = threading.RLock()


class StoredSession(NamedTuple):
    """Outcome of :meth:`LocalStore.add`."""

    record: SessionRecord
    # False when retention dropped the record in the same save (too old,
    # or older than everything in a full store).
    retained: bool


class LocalStore:
    """Persistent, retention-bounded collection of session records."""

    def __init__(self, session: Session, policy: Optional[RetentionPolicy] = None,
                 today: Callable[[], datetime.date] = local_today, ):
        self.repository = KeyValueRepository(session)
        self.policy = policy or RetentionPolicy()
        self._today = today

    # ------------------------------------------------------------------
    # Session collection
    # ------------------------------------------------------------------

    def load(self) -> list[SessionRecord]:
        """Read the persisted collection, retention applied.

        Never raises: unreadable storage yields an empty list and
        unparseable items are dropped.
        """
        try:
            raw = self.repository.get(SESSIONS_KEY)
        except SQLAlchemyError as e:
            logger.warning("Could not read stored sessions, starting empty: %s", e)
            return []
        if not raw:
            return []

        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored sessions are not valid JSON, starting empty: %s", e)
            return []
        if not isinstance(items, list):
            logger.warning("Stored sessions are a %s, not a list; starting empty", type(items).__name__)
            return []

        records = []
        for index, item in enumerate(items):
            try:
                records.append(parse_record(item))
            except ValidationError as e:
                logger.info("Dropping stored session %d: %s", index, e)
        return apply_retention(records, self.policy, self._today())

    def save(self, records: Iterable[SessionRecord]) -> list[SessionRecord]:
        """Persist *records* after applying retention; returns what was stored.

        Raises:
            StorageError: If the write fails.
        """
        kept = apply_retention(records, self.policy, self._today())
        payload = json.dumps([r.to_wire() for r in kept], ensure_ascii=False)
        with STORE_LOCK:
            try:
                self.repository.set(SESSIONS_KEY, payload)
            except SQLAlchemyError as e:
                self.repository.session.rollback()
                raise StorageError(f"could not save sessions: {e}") from e
        return kept

    def add(self, record: Any) -> StoredSession:
        """Validate and insert one record.

        A record outside the retention bounds is accepted but not kept;
        ``retained`` tells the caller which happened.

        Raises:
            ValidationError: If the record is malformed (nothing is stored).
            StorageError: If the write fails.
        """
        parsed = parse_record(record)
        key = identity_key(parsed)
        with STORE_LOCK:
            kept = self.merge_in([parsed])
        retained = any(identity_key(r) == key for r in kept)

        if retained:
            logger.info("Stored session %s %s for %s", parsed.session_date, parsed.time_slot.value,
                        parsed.athlete_name)
        else:
            logger.warning("Session %s for %s falls outside retention and was not kept", parsed.session_date,
                           parsed.athlete_name)
        return StoredSession(record=parsed, retained=retained)

    def merge_in(self, fetched: Iterable[SessionRecord]) -> list[SessionRecord]:
        """Merge *fetched* into the stored collection and persist the result."""
        with STORE_LOCK:
            merged = merge(self.load(), fetched, self.policy, self._today())
            return self.save(merged)

    def clear(self) -> None:
        """Remove every session.  Callers confirm with the user first."""
        with STORE_LOCK:
            self.save([])
        logger.info("Session store cleared")

    def query(self, athlete_name: Optional[str] = None, days: Optional[int] = None) -> list[SessionRecord]:
        """Read-only view filtered by athlete and trailing window."""
        records = filter_athlete(self.load(), athlete_name)
        if days is not None:
            records = window_filter(records, days, self._today())
        return records

    # ------------------------------------------------------------------
    # Athlete identity
    # ------------------------------------------------------------------

    def get_athlete_name(self) -> Optional[str]:
        """Logged-in athlete, or ``None`` when nobody is logged in."""
        try:
            name = self.repository.get(ATHLETE_NAME_KEY)
        except SQLAlchemyError as e:
            logger.warning("Could not read athlete name: %s", e)
            return None
        return name.strip() if name and name.strip() else None

    def set_athlete_name(self, name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("athlete name must not be empty")
        self._write(ATHLETE_NAME_KEY, cleaned)
        return cleaned

    def clear_athlete_name(self) -> None:
        try:
            self.repository.delete(ATHLETE_NAME_KEY)
        except SQLAlchemyError as e:
            self.repository.session.rollback()
            raise StorageError(f"could not clear athlete name: {e}") from e

    # ------------------------------------------------------------------
    # KPI window
    # ------------------------------------------------------------------

    def get_kpi_range_days(self) -> int:
        """Last selected KPI window (falls back to the configured default)."""
        try:
            raw = self.repository.get(KPI_RANGE_KEY)
        except SQLAlchemyError as e:
            logger.warning("Could not read KPI range: %s", e)
            raw = None
        try:
            days = int(raw) if raw is not None else None
        except ValueError:
            days = None
        if days not in settings.KPI_RANGE_CHOICES:
            return settings.DEFAULT_KPI_RANGE_DAYS
        return days

    def set_kpi_range_days(self, days: int) -> int:
        if days not in settings.KPI_RANGE_CHOICES:
            raise ValidationError(f"KPI range must be one of {settings.KPI_RANGE_CHOICES}, got {days}")
        self._write(KPI_RANGE_KEY, str(days))
        return days

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _write(self, key: str, value: str) -> None:
        try:
            self.repository.set(key, value)
        except SQLAlchemyError as e:
            self.repository.session.rollback()
            raise StorageError(f"could not save {key}: {e}") from e
