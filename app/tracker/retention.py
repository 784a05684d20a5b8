"""
Retention policy for the local session collection.

The collection is bounded two ways:

- **age**: only sessions dated within the last ``days`` days are kept,
- **size**: at most ``max_records`` sessions are kept.

Both bounds are applied after canonical sorting (newest first), so the
size cap always drops the oldest sessions, never the newest.  Either bound
can be disabled with ``0``.
"""

from __future__ import annotations

import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from app.core.config import settings
from app.schemas.session_record import SessionRecord
from app.tracker.dates import local_today
from app.tracker.identity import sort_canonical


class RetentionPolicy(BaseModel):
    """Bounds applied every time the collection is saved or loaded."""

    days: int = Field(default_factory=lambda: settings.RETENTION_DAYS, ge=0,
                      description="Age window in days (0 = unbounded)", )
    max_records: int = Field(default_factory=lambda: settings.MAX_SESSIONS, ge=0,
                             description="Maximum number of records (0 = unbounded)", )

    def cutoff(self, today: datetime.date) -> Optional[datetime.date]:
        """Oldest calendar day still retained, or ``None`` if unbounded."""
        if self.days == 0:
            return None
        return today - datetime.timedelta(days=self.days)


def apply_retention(records: Iterable[SessionRecord], policy: Optional[RetentionPolicy] = None,
                    today: Optional[datetime.date] = None, ) -> list[SessionRecord]:
    """Sort *records* canonically and drop what falls outside *policy*.

    Args:
        records: Records in any order.
        policy: Bounds to apply (defaults to the configured policy).
        today: Reference day for the age window (defaults to today).

    Returns:
        A new list, newest first.
    """
    cfg = policy or RetentionPolicy()
    cutoff = cfg.cutoff(today or local_today())

    kept = sort_canonical(records)
    if cutoff is not None:
        kept = [r for r in kept if r.session_date >= cutoff]
    if cfg.max_records:
        kept = kept[:cfg.max_records]
    return kept
