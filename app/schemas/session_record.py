"""
Session record schemas.

A :class:`SessionRecord` is one logged training session.  The same model
validates every ingestion boundary (form submit, stored JSON, remote fetch),
so a record that exists at all is known to be well formed.

Wire format uses the camelCase keys of the remote spreadsheet
(``athleteName``, ``sessionDate``, ``timeSlot`` ...).  ``load`` is derived
(``duration × rpe``) and never serialised with the record itself.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.core.exceptions import ValidationError
from app.tracker.dates import normalize_date


class TimeSlot(str, Enum):
    """Part of the day the session took place in."""

    MORNING = "morning"
    EVENING = "evening"
    UNSPECIFIED = "unspecified"


# Labels seen in older spreadsheets and form variants.
_SLOT_ALIASES: dict[str, TimeSlot] = {
    "morning": TimeSlot.MORNING,
    "am": TimeSlot.MORNING,
    "matin": TimeSlot.MORNING,
    "evening": TimeSlot.EVENING,
    "pm": TimeSlot.EVENING,
    "soir": TimeSlot.EVENING,
}

RATING_FIELDS: tuple[str, ...] = ("rpe", "performance", "engagement", "fatigue")
NUMERIC_FIELDS: tuple[str, ...] = ("duration", "distance") + RATING_FIELDS


class SessionRecord(BaseModel):
    """One logged training session.  Immutable once created."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore",
                              str_strip_whitespace=True, )

    athlete_name: str = Field(..., min_length=1, max_length=200, description="Athlete identity")
    session_date: datetime.date = Field(..., description="Calendar day of the session")
    time_slot: TimeSlot = Field(TimeSlot.UNSPECIFIED, description="morning, evening or unspecified")
    duration: int = Field(..., ge=0, description="Duration in minutes")
    distance: Optional[int] = Field(None, ge=0, description="Distance in meters")
    rpe: int = Field(..., ge=1, le=10, description="Rating of perceived exertion")
    performance: Optional[int] = Field(None, ge=1, le=10)
    engagement: Optional[int] = Field(None, ge=1, le=10)
    fatigue: Optional[int] = Field(None, ge=1, le=10)
    comments: str = Field("", max_length=2000)

    @field_validator("session_date", mode="before")
    @classmethod
    def _normalize_session_date(cls, value: Any) -> datetime.date:
        day = normalize_date(value)
        if day is None:
            raise ValueError(f"not a valid calendar date: {value!r}")
        return day

    @field_validator("time_slot", mode="before")
    @classmethod
    def _normalize_time_slot(cls, value: Any) -> TimeSlot:
        if isinstance(value, TimeSlot):
            return value
        if isinstance(value, str):
            return _SLOT_ALIASES.get(value.strip().lower(), TimeSlot.UNSPECIFIED)
        return TimeSlot.UNSPECIFIED

    @field_validator("distance", "performance", "engagement", "fatigue", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("comments", mode="before")
    @classmethod
    def _comments_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def load(self) -> int:
        """Training load: duration × rpe."""
        return self.duration * self.rpe

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys (no derived fields)."""
        return self.model_dump(mode="json", by_alias=True)


class SessionResponse(BaseModel):
    """A session as returned by the API, with its derived load."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    athlete_name: str
    session_date: datetime.date
    time_slot: TimeSlot
    duration: int
    distance: Optional[int]
    rpe: int
    performance: Optional[int]
    engagement: Optional[int]
    fatigue: Optional[int]
    comments: str
    load: int

    @classmethod
    def from_record(cls, record: SessionRecord) -> SessionResponse:
        return cls(**record.model_dump(), load=record.load)


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"]) or "record"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def parse_record(raw: Any) -> SessionRecord:
    """Validate *raw* into a :class:`SessionRecord`.

    Accepts an existing record, or a mapping with camelCase or snake_case
    keys.

    Raises:
        ValidationError: If a required field is missing or a numeric field is
            not a finite integer in range.
    """
    if isinstance(raw, SessionRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise ValidationError(f"record must be an object, got {type(raw).__name__}")
    try:
        return SessionRecord.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e
