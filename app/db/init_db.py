"""
Database initialization.

Creates all tables for the local store.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Initialize database schema.

    Args:
        bind: Engine to create tables on (defaults to the application engine).
    """
    # Import all models so SQLModel.metadata has them
    import app.db.base  # noqa: F401

    if bind is None:
        from app.db.session import engine as bind

    SQLModel.metadata.create_all(bind)
    logger.info("Tables created on %s", bind.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    init_db()
