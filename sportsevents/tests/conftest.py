"""
Shared pytest configuration for backend tests.

Every test gets its own in-memory SQLite database, so tests never share
state and no external database is needed.
"""

import os

os.environ.setdefault("ENV", "test")

from datetime import timedelta  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from sportsevents.database import db  # noqa: E402
from sportsevents.database.db import Base, create_engine_for_url  # noqa: E402
from sportsevents.services import event_service, join_service, user_service  # noqa: E402
from sportsevents.services.alert_service import register_alert_subscribers  # noqa: E402
from sportsevents.services.event_bus import get_event_bus  # noqa: E402
from sportsevents.utils.datetime_utils import utcnow  # noqa: E402


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a fresh in-memory database for one test."""
    engine = create_engine_for_url("sqlite+aiosqlite://")

    async with engine.begin() as conn:
        from sportsevents.database import models  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)

    # Monkey-patch AsyncSessionLocal so get_db_session (used by the API)
    # talks to the same database as the test fixtures
    test_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    original_async_session_local = db.AsyncSessionLocal
    db.AsyncSessionLocal = test_session_maker

    yield engine

    db.AsyncSessionLocal = original_async_session_local
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """Database session bound to the per-test database."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture(autouse=True)
def alert_subscribers():
    """Subscribe the alert fan-out on a clean event bus for every test."""
    bus = get_event_bus()
    bus.clear()
    register_alert_subscribers(bus)
    yield bus
    bus.clear()


@pytest_asyncio.fixture
async def api_client(test_engine):
    """HTTP client driving the ASGI app in the test's event loop."""
    from sportsevents.api.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def create_test_user(session, username: str, name: str) -> dict:
    """Create a user and return its dict."""
    user_id = await user_service.create_user(
        session, username=username, name=name, password_hash="hashed_password"
    )
    return await user_service.get_user_by_id(session, user_id)


@pytest_asyncio.fixture
async def organizer(db_session):
    return await create_test_user(db_session, "organizer", "Olivia Organizer")


@pytest_asyncio.fixture
async def make_user(db_session):
    """Factory fixture: await make_user("alice") -> user dict."""

    async def _make(username: str, name: str = None) -> dict:
        return await create_test_user(db_session, username, name or username.title())

    return _make


def _event_kwargs(**overrides) -> dict:
    start = utcnow() + timedelta(days=7)
    values = {
        "title": "Spring Cup",
        "description": "Annual spring tournament",
        "venue": "City Arena",
        "start_date": start,
        "end_date": start + timedelta(days=2),
        "sport": "basketball",
        "is_team_event": False,
    }
    values.update(overrides)
    return values


@pytest_asyncio.fixture
async def individual_event(db_session, organizer):
    return await event_service.create_event(
        db_session, organizer, **_event_kwargs(sport="tennis", title="Open Singles")
    )


@pytest_asyncio.fixture
async def team_event(db_session, organizer):
    return await event_service.create_event(
        db_session, organizer, **_event_kwargs(is_team_event=True, title="City League")
    )


@pytest_asyncio.fixture
async def add_participant(db_session):
    """
    Factory fixture running the join flow end to end:
    await add_participant(event, user, role="player") -> participant dict.
    """

    async def _add(event: dict, user: dict, role: str = "player") -> dict:
        result = await join_service.request_to_join_event(
            db_session, user, event["join_code"], role
        )
        assert result["success"], result["message"]
        return await join_service.approve_join_request(
            db_session, event["id"], result["request"]["id"]
        )

    return _add
