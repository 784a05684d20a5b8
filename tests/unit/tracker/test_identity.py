"""Tests for session identity and canonical ordering."""

from app.schemas.session_record import parse_record
from app.tracker.identity import identity_key, sort_canonical


def _record(**overrides):
    data = {"athleteName": "Alice", "sessionDate": "2025-03-05", "timeSlot": "morning", "duration": 60, "rpe": 7}
    data.update(overrides)
    return parse_record(data)


# ======================================================================
# Identity
# ======================================================================


class TestIdentity:
    def test_comments_do_not_change_identity(self):
        assert identity_key(_record(comments="easy")) == identity_key(_record(comments="felt heavy"))

    def test_date_spelling_does_not_change_identity(self):
        assert identity_key(_record(sessionDate="05/03/2025")) == identity_key(_record())

    def test_slot_distinguishes_sessions(self):
        assert identity_key(_record(timeSlot="evening")) != identity_key(_record())

    def test_optional_rating_distinguishes_sessions(self):
        assert identity_key(_record(fatigue=4)) != identity_key(_record())

    def test_identity_uses_canonical_date_text(self):
        assert identity_key(_record()).session_date == "2025-03-05"


# ======================================================================
# Canonical order
# ======================================================================


class TestCanonicalOrder:
    def test_newest_day_first(self):
        older = _record(sessionDate="2025-03-01")
        newer = _record(sessionDate="2025-03-09")
        assert sort_canonical([older, newer]) == [newer, older]

    def test_slot_order_within_a_day(self):
        unspecified = _record(timeSlot="")
        evening = _record(timeSlot="evening")
        morning = _record(timeSlot="morning")
        assert sort_canonical([unspecified, evening, morning]) == [morning, evening, unspecified]

    def test_order_is_deterministic_for_same_slot(self):
        a = _record(duration=30)
        b = _record(duration=90)
        c = _record(duration=60, distance=1000)
        assert sort_canonical([b, c, a]) == sort_canonical([a, b, c]) == sort_canonical([c, a, b])
