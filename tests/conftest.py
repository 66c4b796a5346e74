"""
Shared fixtures.

Unit tests run against the in-memory store; repository tests run against
SQLite through the same SchedulingStore protocol. Nothing here touches a
network or a real MySQL server.
"""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from coach_scheduling.core.scheduling.models import TUESDAY
from coach_scheduling.core.scheduling.service import SchedulingService
from coach_scheduling.infrastructure.database.client import (
    DatabaseConfig,
    create_database_engine,
)
from coach_scheduling.infrastructure.database.memory import InMemorySchedulingStore
from coach_scheduling.infrastructure.database.repositories.scheduling import (
    SchedulingRepository,
)
from coach_scheduling.infrastructure.database.schema import init_schema


# 2025-01-07 is a Tuesday
TUESDAY_DATE = date(2025, 1, 7)


def next_local_weekday(weekday: int, tz_name: str, min_days_ahead: int = 7) -> date:
    """
    First date at least min_days_ahead days from today (in tz) that
    falls on weekday (0=Sunday..6=Saturday). Keeps "upcoming" listings
    stable regardless of when the suite runs.
    """
    today = datetime.now(ZoneInfo(tz_name)).date()
    candidate = today + timedelta(days=min_days_ahead)
    while candidate.isoweekday() % 7 != weekday:
        candidate += timedelta(days=1)
    return candidate


@pytest.fixture
def store() -> InMemorySchedulingStore:
    return InMemorySchedulingStore()


@pytest.fixture
def service(store) -> SchedulingService:
    return SchedulingService(store)


@pytest.fixture
def kolkata_coach(service):
    """Coach in Asia/Kolkata (UTC+5:30, no DST), available Tuesday 09:00-12:00."""
    coach = service.create_coach("Priya", "Asia/Kolkata")
    service.add_availability(coach.id, TUESDAY, "09:00", "12:00")
    return coach


@pytest.fixture
def sql_engine():
    """Fresh in-memory SQLite database with the schema applied."""
    engine = create_database_engine(DatabaseConfig(url="sqlite://"))
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine) -> SchedulingRepository:
    return SchedulingRepository(sql_engine)


@pytest.fixture
def client(store):
    """TestClient wired to a fresh in-memory store."""
    from coach_scheduling.api.dependencies import get_scheduling_store
    from coach_scheduling.main import create_app

    app = create_app()
    app.dependency_overrides[get_scheduling_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_mode_client(monkeypatch):
    """
    TestClient with no overrides, configured for mock mode.

    Exercises the real store dependency: the shared in-memory store is
    created on startup and forgotten again afterwards.
    """
    from coach_scheduling.api.dependencies import reset_scheduling_store
    from coach_scheduling.config.settings import get_settings
    from coach_scheduling.main import create_app

    monkeypatch.setenv("DATABASE_MOCK_MODE", "true")
    get_settings.cache_clear()
    reset_scheduling_store()

    with TestClient(create_app()) as test_client:
        yield test_client

    reset_scheduling_store()
    get_settings.cache_clear()
