"""Tests for the key-value repository and its table model."""

import datetime

from sqlmodel import select

from app.db.repositories.key_value import KeyValueRepository
from app.models.stored_value import StoredValue, utc_now


# ======================================================================
# Timestamps
# ======================================================================


class TestTimestamps:
    def test_utc_now_is_timezone_aware(self):
        now = utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset() == datetime.timedelta(0)

    def test_default_updated_at_is_timezone_aware(self):
        assert StoredValue(key="sessions", value="[]").updated_at.tzinfo is not None


# ======================================================================
# Repository round trip
# ======================================================================


class TestKeyValueRepository:
    def test_missing_key(self, db):
        assert KeyValueRepository(db).get("athleteName") is None

    def test_insert_then_get(self, db):
        repo = KeyValueRepository(db)
        repo.set("athleteName", "Alice")
        assert repo.get("athleteName") == "Alice"

    def test_update_replaces_value_in_place(self, db):
        repo = KeyValueRepository(db)
        repo.set("kpiRangeDays", "30")
        repo.set("kpiRangeDays", "7")
        assert repo.get("kpiRangeDays") == "7"
        assert len(db.exec(select(StoredValue)).all()) == 1

    def test_update_moves_timestamp_forward(self, db):
        repo = KeyValueRepository(db)
        first = repo.set("sessions", "[]").updated_at
        second = repo.set("sessions", "[{}]").updated_at
        # SQLite hands back naive values; compare on the wall clock.
        assert second.replace(tzinfo=None) >= first.replace(tzinfo=None)

    def test_large_value(self, db):
        repo = KeyValueRepository(db)
        payload = "[" + ",".join(["{}"] * 5000) + "]"
        repo.set("sessions", payload)
        assert repo.get("sessions") == payload

    def test_delete(self, db):
        repo = KeyValueRepository(db)
        repo.set("athleteName", "Alice")
        assert repo.delete("athleteName") is True
        assert repo.get("athleteName") is None
        assert repo.delete("athleteName") is False
