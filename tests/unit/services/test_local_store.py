"""Tests for the persistent local session store."""

import datetime
import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.exceptions import StorageError, ValidationError
from app.services.local_store import KPI_RANGE_KEY, SESSIONS_KEY, LocalStore
from app.tracker.retention import RetentionPolicy

TODAY = datetime.date(2025, 1, 20)


def _raw(**overrides) -> dict:
    data = {"athleteName": "Alice", "sessionDate": "2025-01-10", "timeSlot": "morning", "duration": 60, "rpe": 7}
    data.update(overrides)
    return data


@pytest.fixture
def store(db):
    return LocalStore(db, policy=RetentionPolicy(days=365, max_records=400), today=lambda: TODAY)


# ======================================================================
# Add / load
# ======================================================================


class TestAddAndLoad:
    def test_empty_store(self, store):
        assert store.load() == []

    def test_add_then_load(self, store):
        stored = store.add(_raw())
        assert stored.retained
        loaded = store.load()
        assert loaded == [stored.record]
        assert loaded[0].load == 420

    def test_add_persists_across_instances(self, db, store):
        store.add(_raw())
        other = LocalStore(db, policy=store.policy, today=lambda: TODAY)
        assert len(other.load()) == 1

    def test_malformed_record_rejected_and_nothing_stored(self, store):
        with pytest.raises(ValidationError):
            store.add(_raw(rpe="abc"))
        assert store.load() == []

    def test_same_identity_stored_once(self, store):
        store.add(_raw(comments="first"))
        store.add(_raw(sessionDate="10/01/2025", comments="second"))
        loaded = store.load()
        assert len(loaded) == 1
        assert loaded[0].comments == "second"

    def test_loaded_records_canonically_sorted(self, store):
        store.add(_raw(sessionDate="2025-01-05"))
        store.add(_raw(timeSlot="evening"))
        store.add(_raw())
        assert [(r.session_date.day, r.time_slot.value) for r in store.load()] == [
            (10, "morning"),
            (10, "evening"),
            (5, "morning"),
        ]

    def test_returned_list_is_a_copy(self, store):
        store.add(_raw())
        store.load().clear()
        assert len(store.load()) == 1


# ======================================================================
# Retention
# ======================================================================


class TestRetention:
    def test_record_older_than_window_disappears(self, store):
        stored = store.add(_raw(sessionDate="2023-06-01"))
        assert not stored.retained
        assert stored.record.session_date.year == 2023
        assert store.load() == []

    def test_cap_drops_oldest(self, db):
        store = LocalStore(db, policy=RetentionPolicy(days=365, max_records=3), today=lambda: TODAY)
        for day in (11, 12, 13):
            store.add(_raw(sessionDate=f"2025-01-{day}"))
        assert store.add(_raw(sessionDate="2025-01-14")).retained
        assert [r.session_date.day for r in store.load()] == [14, 13, 12]

    def test_cap_keeps_newest_when_oldest_added_last(self, db):
        store = LocalStore(db, policy=RetentionPolicy(days=365, max_records=3), today=lambda: TODAY)
        for day in (12, 13, 14):
            store.add(_raw(sessionDate=f"2025-01-{day}"))
        stored = store.add(_raw(sessionDate="2025-01-11"))
        assert not stored.retained
        assert [r.session_date.day for r in store.load()] == [14, 13, 12]


# ======================================================================
# Corrupt storage
# ======================================================================


class TestCorruptStorage:
    def test_invalid_json_loads_empty(self, store):
        store.repository.set(SESSIONS_KEY, "{not json")
        assert store.load() == []

    def test_non_list_loads_empty(self, store):
        store.repository.set(SESSIONS_KEY, json.dumps({"sessions": []}))
        assert store.load() == []

    def test_bad_items_dropped(self, store):
        items = [_raw(), _raw(rpe="abc"), "junk", _raw(sessionDate="2025-01-12")]
        store.repository.set(SESSIONS_KEY, json.dumps(items))
        assert [r.session_date.day for r in store.load()] == [12, 10]

    def test_read_failure_loads_empty(self, store, monkeypatch):
        def broken(key):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(store.repository, "get", broken)
        assert store.load() == []

    def test_write_failure_raises_storage_error(self, store, monkeypatch):
        def broken(key, value):
            raise SQLAlchemyError("database is locked")

        monkeypatch.setattr(store.repository, "set", broken)
        with pytest.raises(StorageError):
            store.add(_raw())


# ======================================================================
# Clear / query
# ======================================================================


class TestClearAndQuery:
    def test_clear(self, store):
        store.add(_raw())
        store.clear()
        assert store.load() == []

    def test_query_by_athlete_and_window(self, store):
        store.add(_raw())
        store.add(_raw(athleteName="Bob"))
        store.add(_raw(sessionDate="2024-12-01"))
        assert len(store.query()) == 3
        assert len(store.query("Alice")) == 2
        assert len(store.query("Alice", days=30)) == 1


# ======================================================================
# Athlete name / KPI range
# ======================================================================


class TestDeviceState:
    def test_athlete_name_lifecycle(self, store):
        assert store.get_athlete_name() is None
        assert store.set_athlete_name("  Bob ") == "Bob"
        assert store.get_athlete_name() == "Bob"
        store.clear_athlete_name()
        assert store.get_athlete_name() is None

    def test_empty_athlete_name_rejected(self, store):
        with pytest.raises(ValidationError):
            store.set_athlete_name("   ")

    def test_kpi_range_default(self, store):
        assert store.get_kpi_range_days() == settings.DEFAULT_KPI_RANGE_DAYS

    def test_kpi_range_roundtrip(self, store):
        assert store.set_kpi_range_days(7) == 7
        assert store.get_kpi_range_days() == 7

    def test_kpi_range_outside_choices(self, store):
        with pytest.raises(ValidationError):
            store.set_kpi_range_days(14)

    def test_garbage_kpi_range_falls_back(self, store):
        store.repository.set(KPI_RANGE_KEY, "lots")
        assert store.get_kpi_range_days() == settings.DEFAULT_KPI_RANGE_DAYS
