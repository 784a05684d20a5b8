"""Shared fixtures for unit tests that need a database: in-memory SQLite per test."""

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.db.init_db import init_db


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session
