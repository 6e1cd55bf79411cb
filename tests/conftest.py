"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database. StaticPool keeps the
single connection alive so all sessions from the factory see the same data.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from database.database import create_session_factory
from database.models import Base
from tests.fixtures.power_match_fixtures import FrozenClock, Seeder

NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


def make_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def engine():
    engine = make_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
def seed(session_factory, clock):
    return Seeder(session_factory, clock)
