"""Tests for the SessionRecord schema and its ingestion check."""

import datetime
import math

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.schemas.session_record import SessionRecord, SessionResponse, TimeSlot, parse_record


def _raw(**overrides) -> dict:
    data = {
        "athleteName": "Alice",
        "sessionDate": "2025-01-10",
        "timeSlot": "morning",
        "duration": 60,
        "rpe": 7,
    }
    data.update(overrides)
    return data


# ======================================================================
# Valid records
# ======================================================================


class TestValidRecords:
    def test_minimal_record(self):
        r = parse_record(_raw())
        assert r.athlete_name == "Alice"
        assert r.session_date == datetime.date(2025, 1, 10)
        assert r.time_slot is TimeSlot.MORNING
        assert r.distance is None
        assert r.performance is None
        assert r.comments == ""

    def test_load_is_duration_times_rpe(self):
        assert parse_record(_raw()).load == 420

    def test_snake_case_keys_accepted(self):
        r = parse_record({"athlete_name": "Bob", "session_date": "2025-01-10", "duration": 30, "rpe": 5})
        assert r.athlete_name == "Bob"
        assert r.time_slot is TimeSlot.UNSPECIFIED

    def test_day_first_date_normalised(self):
        assert parse_record(_raw(sessionDate="10/01/2025")).session_date == datetime.date(2025, 1, 10)

    def test_numeric_strings_from_spreadsheet(self):
        r = parse_record(_raw(duration="45", rpe="6", distance="1500"))
        assert (r.duration, r.rpe, r.distance) == (45, 6, 1500)

    def test_integral_float_accepted(self):
        assert parse_record(_raw(duration=60.0)).duration == 60

    def test_blank_optionals_are_missing(self):
        r = parse_record(_raw(distance="", performance="", fatigue=None))
        assert r.distance is None
        assert r.performance is None
        assert r.fatigue is None

    def test_none_comments_become_empty(self):
        assert parse_record(_raw(comments=None)).comments == ""

    def test_unknown_fields_ignored(self):
        r = parse_record(_raw(userAgent="Mozilla/5.0", timestamp="2025-01-10T10:00:00Z"))
        assert "userAgent" not in r.to_wire()

    def test_name_is_stripped(self):
        assert parse_record(_raw(athleteName="  Alice ")).athlete_name == "Alice"

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("morning", TimeSlot.MORNING),
            ("Matin", TimeSlot.MORNING),
            ("EVENING", TimeSlot.EVENING),
            ("soir", TimeSlot.EVENING),
            ("night", TimeSlot.UNSPECIFIED),
            ("", TimeSlot.UNSPECIFIED),
            (None, TimeSlot.UNSPECIFIED),
        ],
    )
    def test_time_slot_labels(self, label, expected):
        assert parse_record(_raw(timeSlot=label)).time_slot is expected

    def test_existing_record_returned_as_is(self):
        r = parse_record(_raw())
        assert parse_record(r) is r


# ======================================================================
# Rejected records
# ======================================================================


class TestRejectedRecords:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"rpe": "abc"},
            {"rpe": 7.5},
            {"rpe": math.nan},
            {"rpe": 0},
            {"rpe": 11},
            {"duration": math.inf},
            {"duration": -5},
            {"duration": "sixty"},
            {"distance": -1},
            {"performance": 12},
            {"athleteName": ""},
            {"athleteName": "   "},
            {"sessionDate": "not a date"},
            {"sessionDate": "2025-02-30"},
        ],
    )
    def test_invalid_fields(self, overrides):
        with pytest.raises(ValidationError):
            parse_record(_raw(**overrides))

    @pytest.mark.parametrize("missing", ["athleteName", "sessionDate", "duration", "rpe"])
    def test_missing_required(self, missing):
        data = _raw()
        del data[missing]
        with pytest.raises(ValidationError):
            parse_record(data)

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError):
            parse_record(["Alice", "2025-01-10"])

    def test_error_names_the_field(self):
        with pytest.raises(ValidationError, match="rpe"):
            parse_record(_raw(rpe="abc"))


# ======================================================================
# Serialisation / immutability
# ======================================================================


class TestSerialisation:
    def test_wire_format_is_camel_case_without_load(self):
        wire = parse_record(_raw(distance=2000, comments="ok")).to_wire()
        assert wire == {
            "athleteName": "Alice",
            "sessionDate": "2025-01-10",
            "timeSlot": "morning",
            "duration": 60,
            "distance": 2000,
            "rpe": 7,
            "performance": None,
            "engagement": None,
            "fatigue": None,
            "comments": "ok",
        }

    def test_wire_round_trip(self):
        r = parse_record(_raw(distance=2000, fatigue=3))
        assert parse_record(r.to_wire()) == r

    def test_records_are_immutable(self):
        r = parse_record(_raw())
        with pytest.raises(PydanticValidationError):
            r.rpe = 9

    def test_response_carries_load(self):
        response = SessionResponse.from_record(parse_record(_raw()))
        assert response.load == 420
        assert response.model_dump(by_alias=True)["athleteName"] == "Alice"

    def test_direct_construction_by_field_name(self):
        r = SessionRecord(athlete_name="Alice", session_date="2025-01-10", duration=60, rpe=7)
        assert r.session_date == datetime.date(2025, 1, 10)
