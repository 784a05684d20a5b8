"""
Key-value database model.

The local store is a small string-valued key-value space
(``sessions``, ``athleteName``, ``kpiRangeDays``); each key is one row.
"""

import datetime

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


def utc_now() -> datetime.datetime:
    """Timezone-aware current time in UTC."""
    return datetime.datetime.now(datetime.timezone.utc)


class StoredValue(SQLModel, table=True):
    """A single persisted key and its string value."""

    __tablename__ = "stored_values"

    key: str = Field(primary_key=True, max_length=100)
    value: str = Field(default="", sa_column=Column(Text, nullable=False))

    updated_at: datetime.datetime = Field(default_factory=utc_now,
                                          sa_column=Column(DateTime(timezone=True), nullable=False))
