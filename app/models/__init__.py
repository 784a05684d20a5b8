"""SQLModel database models."""

from app.models.stored_value import StoredValue

__all__ = [
    "StoredValue",
]
