"""Database repositories."""

from app.db.repositories.key_value import KeyValueRepository

__all__ = [
    "KeyValueRepository",
]
