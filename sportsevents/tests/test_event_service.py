"""
Unit tests for event service.
Tests join code generation, event creation and lookups, and organizer checks.
"""

import re
import pytest
from datetime import timedelta
from sportsevents.services import event_service
from sportsevents.services.errors import Forbidden, NotFound, ValidationError
from sportsevents.utils.datetime_utils import utcnow

JOIN_CODE_PATTERN = re.compile(r"^[A-Z0-9]{8}$")


def _event_fields(**overrides):
    start = utcnow() + timedelta(days=3)
    fields = {
        "title": "Summer Classic",
        "description": "Weekend tournament",
        "venue": "Main Court",
        "start_date": start,
        "sport": "volleyball",
    }
    fields.update(overrides)
    return fields


def test_generate_join_code_format():
    for _ in range(100):
        assert JOIN_CODE_PATTERN.match(event_service.generate_join_code())


@pytest.mark.asyncio
async def test_generate_unique_join_code_retries_on_collision(db_session, organizer, monkeypatch):
    event = await event_service.create_event(db_session, organizer, **_event_fields())

    candidates = iter([event["join_code"], event["join_code"], "NEWCODE1"])
    monkeypatch.setattr(event_service, "generate_join_code", lambda: next(candidates))

    assert await event_service.generate_unique_join_code(db_session) == "NEWCODE1"


@pytest.mark.asyncio
async def test_join_codes_unique_across_events(db_session, organizer):
    codes = set()
    for i in range(20):
        event = await event_service.create_event(
            db_session, organizer, **_event_fields(title=f"Event {i}")
        )
        assert JOIN_CODE_PATTERN.match(event["join_code"])
        codes.add(event["join_code"])
    assert len(codes) == 20


@pytest.mark.asyncio
async def test_create_event(db_session, organizer):
    event = await event_service.create_event(
        db_session, organizer, **_event_fields(is_team_event=True)
    )

    assert event["id"] > 0
    assert event["title"] == "Summer Classic"
    assert event["status"] == "upcoming"
    assert event["is_team_event"] is True
    assert event["created_by"] == organizer["id"]
    # end_date defaults to start_date
    assert event["end_date"] == event["start_date"]


@pytest.mark.asyncio
async def test_create_event_validation(db_session, organizer):
    with pytest.raises(ValidationError, match="title is required"):
        await event_service.create_event(db_session, organizer, **_event_fields(title="  "))

    with pytest.raises(ValidationError, match="venue is required"):
        await event_service.create_event(db_session, organizer, **_event_fields(venue=""))

    with pytest.raises(ValidationError, match="Unsupported sport"):
        await event_service.create_event(db_session, organizer, **_event_fields(sport="chess"))

    start = utcnow() + timedelta(days=3)
    with pytest.raises(ValidationError, match="end date cannot be before"):
        await event_service.create_event(
            db_session,
            organizer,
            **_event_fields(start_date=start, end_date=start - timedelta(days=1)),
        )


@pytest.mark.asyncio
async def test_get_event_by_join_code_case_insensitive(db_session, organizer):
    event = await event_service.create_event(db_session, organizer, **_event_fields())

    found = await event_service.get_event_by_join_code(db_session, event["join_code"].lower())
    assert found["id"] == event["id"]
    assert await event_service.get_event_by_join_code(db_session, "ZZZZZZZZ") is None
    assert await event_service.get_event_by_join_code(db_session, "") is None


@pytest.mark.asyncio
async def test_get_event_with_details(db_session, individual_event, make_user, add_participant):
    player = await make_user("pat")
    participant = await add_participant(individual_event, player)

    event = await event_service.get_event(db_session, individual_event["id"])

    assert event["title"] == "Open Singles"
    assert [p["id"] for p in event["participants"]] == [participant["id"]]
    assert event["pending_requests"][0]["status"] == "approved"
    assert event["teams"] == []
    assert event["announcements"] == []


@pytest.mark.asyncio
async def test_get_event_unknown(db_session):
    assert await event_service.get_event(db_session, 999) is None
    with pytest.raises(NotFound):
        await event_service.require_event(db_session, 999)


@pytest.mark.asyncio
async def test_get_events_in_creation_order(db_session, organizer):
    await event_service.create_event(db_session, organizer, **_event_fields(title="First"))
    await event_service.create_event(db_session, organizer, **_event_fields(title="Second"))

    events = await event_service.get_events(db_session)
    assert [e["title"] for e in events] == ["First", "Second"]


@pytest.mark.asyncio
async def test_is_event_organizer(db_session, individual_event, organizer, make_user, add_participant):
    player = await make_user("pat")
    admin = await make_user("ada")
    await add_participant(individual_event, player, role="player")
    await add_participant(individual_event, admin, role="admin")

    event_id = individual_event["id"]
    assert await event_service.is_event_organizer(db_session, event_id, organizer["id"])
    assert await event_service.is_event_organizer(db_session, event_id, admin["id"])
    assert not await event_service.is_event_organizer(db_session, event_id, player["id"])
    assert not await event_service.is_event_organizer(db_session, 999, organizer["id"])


@pytest.mark.asyncio
async def test_require_event_organizer(db_session, individual_event, organizer, make_user, add_participant):
    admin = await make_user("adam")
    player = await make_user("pia")
    outsider = await make_user("otto")
    await add_participant(individual_event, admin, "admin")
    await add_participant(individual_event, player, "player")
    event_id = individual_event["id"]

    for user in (organizer, admin):
        event = await event_service.require_event_organizer(db_session, event_id, user["id"])
        assert event.id == event_id
    for user in (player, outsider):
        with pytest.raises(Forbidden, match="organizer access required"):
            await event_service.require_event_organizer(db_session, event_id, user["id"])
    with pytest.raises(NotFound):
        await event_service.require_event_organizer(db_session, 999, organizer["id"])
