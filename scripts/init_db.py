"""
Create the local store schema and report what it holds.

Equivalent to ``alembic upgrade head`` for a fresh SQLite file; safe to run
on an existing database (tables are only created when missing).

Usage:
    python scripts/init_db.py
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.init_db import init_db
from app.db.session import engine
from app.services.local_store import LocalStore


def main() -> int:
    configure_logging()
    print(f"Initializing {settings.DATABASE_URL}")
    try:
        init_db(engine)
    except SQLAlchemyError as e:
        print(f"ERROR: could not create tables: {e}")
        return 1

    with Session(engine) as db:
        store = LocalStore(db)
        print(f"  athlete:   {store.get_athlete_name() or '(nobody logged in)'}")
        print(f"  sessions:  {len(store.load())}")
        print(f"  KPI range: {store.get_kpi_range_days()} days")
    return 0


if __name__ == "__main__":
    sys.exit(main())
