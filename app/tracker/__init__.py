"""Training log core: date normalisation, identity, reconciliation, metrics and series."""

from app.tracker.dates import format_date, local_today, normalize_date

__all__ = ["format_date", "local_today", "normalize_date"]
