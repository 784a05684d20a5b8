"""
Remote sync client.

Talks to the spreadsheet-backed web app over a single endpoint:

- **push**: ``POST`` one session as JSON (sent as ``text/plain`` so the web
  app accepts it without a CORS preflight), redirects followed.  The web app
  acknowledges with a body starting with ``OK``.
- **fetch**: ``GET ?action=get&athleteName=...&limit=...`` returning
  ``{"ok": true, "sessions": [...]}``.
- **hall**: ``GET ?action=hall&days=...`` returning
  ``{"ok": true, "athletes": [...]}`` for the coach leaderboard.

The client never touches local storage and never retries.  Every failure is
raised as :class:`SyncError` (or :class:`FormatError` for malformed payloads)
with a readable cause.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import FormatError, SyncError, ValidationError
from app.schemas.analytics import LeaderboardEntry
from app.schemas.session_record import SessionRecord, parse_record
from app.schemas.sync import FetchResult

logger = logging.getLogger(__name__)


class SyncClient:
    """Push and pull sessions against the configured web app."""

    def __init__(self, endpoint: Optional[str] = None, token: Optional[str] = None,
                 timeout: Optional[float] = None, ack_token: Optional[str] = None,
                 http: Optional[requests.Session] = None, ):
        self.endpoint = (settings.SYNC_ENDPOINT if endpoint is None else endpoint).strip()
        self.token = settings.SYNC_TOKEN if token is None else token
        self.timeout = settings.SYNC_TIMEOUT if timeout is None else timeout
        self.ack_token = settings.SYNC_ACK_TOKEN if ack_token is None else ack_token
        self.http = http or requests.Session()
        self.user_agent = f"{settings.PROJECT_NAME}/{settings.VERSION} python-requests/{requests.__version__}"

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def push(self, record: SessionRecord, user_agent: Optional[str] = None) -> None:
        """Send one session to the web app.

        Raises:
            SyncError: On network failure, non-2xx status or a body that is
                not the acknowledgement token.
        """
        self._require_endpoint()
        body = {**record.to_wire(), "userAgent": user_agent or self.user_agent}

        try:
            resp = self.http.post(self.endpoint, params=self._params(),
                                  data=json.dumps(body, ensure_ascii=False).encode("utf-8"),
                                  headers={"Content-Type": "text/plain;charset=utf-8"}, timeout=self.timeout,
                                  allow_redirects=True, )
        except requests.RequestException as e:
            raise SyncError(f"network error while sending session: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise SyncError(f"unexpected HTTP status {resp.status_code} while sending session")

        text = (resp.text or "").strip()
        if not self.ack_token or not text.startswith(self.ack_token):
            raise SyncError(f"unexpected response from web app: {text[:120]!r}")

        logger.info("Pushed session %s for %s", record.session_date, record.athlete_name)

    def fetch(self, athlete_name: str, limit: Optional[int] = None) -> FetchResult:
        """Fetch one athlete's sessions.

        Items failing validation are dropped and counted, not fatal.

        Raises:
            SyncError: If *athlete_name* is empty (no request is made), or the
                request fails.
            FormatError: If the response is not the expected envelope.
        """
        name = (athlete_name or "").strip()
        if not name:
            raise SyncError("an athlete name is required to fetch sessions")
        self._require_endpoint()

        cap = settings.DEFAULT_FETCH_LIMIT if limit is None else limit
        if isinstance(cap, bool) or not isinstance(cap, int) or cap <= 0:
            raise ValueError(f"limit must be a positive integer, got {cap!r}")

        payload = self._get_envelope({"action": "get", "athleteName": name, "limit": cap})
        items = payload.get("sessions")
        if not isinstance(items, list):
            raise FormatError("response has no 'sessions' list")

        records: list[SessionRecord] = []
        dropped = 0
        for index, item in enumerate(items):
            if isinstance(item, Mapping) and not item.get("athleteName"):
                item = {**item, "athleteName": name}
            try:
                records.append(parse_record(item))
            except ValidationError as e:
                dropped += 1
                logger.info("Dropping remote session %d for %s: %s", index, name, e)

        logger.info("Fetched %d sessions for %s (%d dropped)", len(records), name, dropped)
        return FetchResult(records=records, dropped=dropped)

    def hall(self, days: int) -> list[LeaderboardEntry]:
        """Fetch the leaderboard over the last *days* days."""
        self._require_endpoint()
        payload = self._get_envelope({"action": "hall", "days": days})
        items = payload.get("athletes")
        if not isinstance(items, list):
            raise FormatError("response has no 'athletes' list")

        entries = []
        for item in items:
            try:
                entries.append(LeaderboardEntry.model_validate(item))
            except PydanticValidationError as e:
                logger.info("Dropping leaderboard row %r: %s", item, e.error_count())
        return entries

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_endpoint(self) -> None:
        if not self.is_configured:
            raise SyncError("sync endpoint not configured")

    def _params(self, extra: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.token:
            params["token"] = self.token
        if extra:
            params.update(extra)
        return params

    def _get_envelope(self, query: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = self.http.get(self.endpoint, params=self._params(query), timeout=self.timeout,
                                 allow_redirects=True, )
        except requests.RequestException as e:
            raise SyncError(f"network error during '{query.get('action')}': {e}") from e

        if not 200 <= resp.status_code < 300:
            raise SyncError(f"unexpected HTTP status {resp.status_code} during '{query.get('action')}'")

        try:
            payload = resp.json()
        except ValueError as e:
            raise FormatError(f"response is not JSON: {(resp.text or '')[:120]!r}") from e

        if not isinstance(payload, dict):
            raise FormatError(f"expected a JSON object, got {type(payload).__name__}")
        if payload.get("ok") is not True:
            reason = payload.get("error") or payload.get("message") or "ok flag missing or false"
            raise SyncError(f"web app refused '{query.get('action')}': {reason}")
        return payload
