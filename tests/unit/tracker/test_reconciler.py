"""Tests for merging local and fetched session records."""

import datetime

from app.schemas.session_record import parse_record
from app.tracker.identity import sort_canonical
from app.tracker.reconciler import merge
from app.tracker.retention import RetentionPolicy

TODAY = datetime.date(2025, 3, 10)
POLICY = RetentionPolicy(days=365, max_records=400)


def _record(**overrides):
    data = {"athleteName": "Alice", "sessionDate": "2025-03-05", "timeSlot": "morning", "duration": 60, "rpe": 7}
    data.update(overrides)
    return parse_record(data)


def _merge(local, fetched, policy=POLICY):
    return merge(local, fetched, policy, TODAY)


# ======================================================================
# Merge properties
# ======================================================================


class TestMergeProperties:
    def test_origin_agnostic_for_single_record(self):
        r = _record()
        assert _merge([r], []) == _merge([], [r]) == [r]

    def test_idempotent(self):
        local = [_record(), _record(sessionDate="2025-03-04", comments="local")]
        fetched = [_record(comments="sheet"), _record(sessionDate="2025-03-06", timeSlot="evening")]
        merged = _merge(local, fetched)
        assert _merge(local, merged) == merged
        assert _merge(merged, merged) == merged

    def test_no_duplicate_identities(self):
        merged = _merge([_record(), _record()], [_record(sessionDate="05/03/2025")])
        assert len(merged) == 1

    def test_result_is_canonically_sorted(self):
        records = [
            _record(sessionDate="2025-03-01"),
            _record(sessionDate="2025-03-08", timeSlot="evening"),
            _record(sessionDate="2025-03-08", timeSlot="morning"),
        ]
        merged = _merge(records[:1], records[1:])
        assert merged == sort_canonical(records)

    def test_empty_inputs(self):
        assert _merge([], []) == []


# ======================================================================
# Conflict resolution
# ======================================================================


class TestConflicts:
    def test_fetched_wins_on_comments(self):
        local = _record(comments="A")
        fetched = _record(comments="B")
        merged = _merge([local], [fetched])
        assert len(merged) == 1
        assert merged[0].comments == "B"

    def test_distinct_sessions_are_kept(self):
        morning = _record()
        evening = _record(timeSlot="evening")
        assert _merge([morning], [evening]) == [morning, evening]

    def test_other_athletes_are_kept(self):
        alice = _record()
        bob = _record(athleteName="Bob")
        assert len(_merge([alice], [bob])) == 2


# ======================================================================
# Retention during merge
# ======================================================================


class TestRetentionOnMerge:
    def test_stale_fetched_record_dropped(self):
        stale = _record(sessionDate="2023-01-01")
        assert _merge([], [stale]) == []

    def test_cap_keeps_newest(self):
        local = [_record(sessionDate=f"2025-03-0{d}") for d in (1, 2, 3)]
        merged = _merge(local, [_record(sessionDate="2025-03-09")], RetentionPolicy(days=365, max_records=3))
        assert [r.session_date.day for r in merged] == [9, 3, 2]
