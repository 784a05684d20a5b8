"""
Reconciliation of local and fetched session records.

:func:`merge` is the only way records enter the canonical collection.  It
keys every record by :func:`~app.tracker.identity.identity_key`, seeds the
mapping with the local records and then lets the fetched ones overwrite.
When a fetched record shares an identity with a local one, the fetched copy
wins, including its comments.

The result is sorted canonically and bounded by the retention policy, which
makes the merge idempotent: merging an already merged collection again
changes nothing.
"""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, Optional

from app.schemas.session_record import SessionRecord
from app.tracker.identity import SessionIdentity, identity_key
from app.tracker.retention import RetentionPolicy, apply_retention

logger = logging.getLogger(__name__)


def merge(local_records: Iterable[SessionRecord], fetched_records: Iterable[SessionRecord],
          policy: Optional[RetentionPolicy] = None, today: Optional[datetime.date] = None, ) -> list[SessionRecord]:
    """Merge *fetched_records* into *local_records* without duplicates.

    Args:
        local_records: Records already held locally.
        fetched_records: Records returned by the remote service (or a freshly
            submitted record).
        policy: Retention bounds (defaults to the configured policy).
        today: Reference day for retention (defaults to today).

    Returns:
        Deduplicated records in canonical order, retention applied.
    """
    by_identity: dict[SessionIdentity, SessionRecord] = {}
    for record in local_records:
        by_identity[identity_key(record)] = record

    replaced = added = 0
    for record in fetched_records:
        key = identity_key(record)
        if key in by_identity:
            replaced += 1
        else:
            added += 1
        by_identity[key] = record

    merged = apply_retention(by_identity.values(), policy, today)
    logger.debug("Merged %d new and %d known records into %d", added, replaced, len(merged))
    return merged
