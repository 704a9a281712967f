"""
Unit tests for user service.
Tests account creation, lookups, and login session lifecycle.
"""

import pytest
from datetime import timedelta
from sportsevents.services import user_service
from sportsevents.services.errors import Conflict
from sportsevents.utils.datetime_utils import utcnow


@pytest.mark.asyncio
async def test_create_user(db_session):
    user_id = await user_service.create_user(
        db_session, username="alice", name="Alice", password_hash="hashed"
    )

    user = await user_service.get_user_by_id(db_session, user_id)
    assert user["username"] == "alice"
    assert user["name"] == "Alice"
    assert user["role"] == "admin"
    assert user["created_at"] is not None


@pytest.mark.asyncio
async def test_create_user_duplicate_username_case_insensitive(db_session):
    await user_service.create_user(db_session, username="alice", name="Alice", password_hash="h")

    with pytest.raises(Conflict, match="already taken"):
        await user_service.create_user(
            db_session, username="ALICE", name="Other", password_hash="h"
        )


@pytest.mark.asyncio
async def test_get_user_by_username_ignores_case(db_session):
    user_id = await user_service.create_user(
        db_session, username="Bob", name="Bob", password_hash="h"
    )

    user = await user_service.get_user_by_username(db_session, "bob")
    assert user["id"] == user_id
    assert await user_service.get_user_by_username(db_session, "nobody") is None
    assert await user_service.get_user_by_username(db_session, "") is None


@pytest.mark.asyncio
async def test_public_user_hides_password_hash(db_session, organizer):
    public = user_service.public_user(organizer)
    assert "password_hash" not in public
    assert public["username"] == "organizer"


@pytest.mark.asyncio
async def test_get_all_users(db_session, make_user):
    await make_user("alice")
    await make_user("bob")

    users = await user_service.get_all_users(db_session)
    assert [u["username"] for u in users] == ["alice", "bob"]


@pytest.mark.asyncio
async def test_login_session_lifecycle(db_session, organizer):
    expires_at = (utcnow() + timedelta(hours=1)).isoformat()
    created = await user_service.create_login_session(
        db_session, organizer["id"], "token-1", expires_at
    )
    assert created["user_id"] == organizer["id"]

    found = await user_service.get_login_session(db_session, "token-1")
    assert found["user_id"] == organizer["id"]

    assert await user_service.delete_login_session(db_session, "token-1") is True
    assert await user_service.get_login_session(db_session, "token-1") is None
    assert await user_service.delete_login_session(db_session, "token-1") is False


@pytest.mark.asyncio
async def test_multiple_sessions_per_user(db_session, organizer):
    expires_at = (utcnow() + timedelta(hours=1)).isoformat()
    await user_service.create_login_session(db_session, organizer["id"], "phone", expires_at)
    await user_service.create_login_session(db_session, organizer["id"], "laptop", expires_at)

    await user_service.delete_login_session(db_session, "phone")

    assert await user_service.get_login_session(db_session, "phone") is None
    assert await user_service.get_login_session(db_session, "laptop") is not None


@pytest.mark.asyncio
async def test_expired_session_rejected_and_purged(db_session, organizer):
    past = (utcnow() - timedelta(minutes=1)).isoformat()
    future = (utcnow() + timedelta(hours=1)).isoformat()
    await user_service.create_login_session(db_session, organizer["id"], "old", past)
    await user_service.create_login_session(db_session, organizer["id"], "new", future)

    assert await user_service.get_login_session(db_session, "old") is None

    purged = await user_service.delete_expired_login_sessions(db_session)
    assert purged == 1
    assert await user_service.get_login_session(db_session, "new") is not None
