"""
Key-value repository.

Handles database operations for :class:`StoredValue`.
"""

from typing import Optional

from sqlmodel import Session

from app.models.stored_value import StoredValue, utc_now


class KeyValueRepository:
    """Repository for StoredValue database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or ``None`` if absent."""
        entry = self.session.get(StoredValue, key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> StoredValue:
        """Insert or replace the value stored under *key*."""
        entry = self.session.get(StoredValue, key)
        if entry is None:
            entry = StoredValue(key=key, value=value)
        else:
            entry.value = value
            entry.updated_at = utc_now()
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def delete(self, key: str) -> bool:
        entry = self.session.get(StoredValue, key)
        if entry:
            self.session.delete(entry)
            self.session.commit()
            return True
        return False
