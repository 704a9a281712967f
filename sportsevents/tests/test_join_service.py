"""
Unit tests for the join-code workflow.
Tests join requests, duplicate handling, and approval/rejection.
"""

import pytest
from sportsevents.services import event_service, join_service
from sportsevents.services.errors import NotFound, ValidationError


@pytest.mark.asyncio
async def test_request_to_join_event(db_session, individual_event, make_user):
    user = await make_user("uma", "Uma")

    result = await join_service.request_to_join_event(
        db_session, user, individual_event["join_code"], "player"
    )

    assert result["success"] is True
    assert result["error"] is None
    assert result["event_title"] == "Open Singles"
    assert result["message"] == (
        'Join request sent for "Open Singles" as player. '
        "Please wait for approval from the event organizer."
    )
    assert result["request"]["status"] == "pending"
    assert result["request"]["user_name"] == "Uma"


@pytest.mark.asyncio
async def test_request_to_join_code_is_case_insensitive(db_session, individual_event, make_user):
    user = await make_user("uma")

    result = await join_service.request_to_join_event(
        db_session, user, individual_event["join_code"].lower(), "coach"
    )
    assert result["success"] is True
    assert result["request"]["requested_role"] == "coach"


@pytest.mark.asyncio
async def test_request_to_join_requires_user(db_session, individual_event):
    result = await join_service.request_to_join_event(
        db_session, None, individual_event["join_code"], "player"
    )

    assert result["success"] is False
    assert result["error"] == "unauthorized"
    assert result["message"] == "You must be logged in to join an event."


@pytest.mark.asyncio
async def test_request_to_join_unknown_code(db_session, make_user):
    user = await make_user("uma")

    result = await join_service.request_to_join_event(db_session, user, "NOPE1234", "player")

    assert result["success"] is False
    assert result["error"] == "not_found"
    assert result["message"] == "Invalid join code. Please check and try again."


@pytest.mark.asyncio
async def test_request_to_join_invalid_role(db_session, individual_event, make_user):
    user = await make_user("uma")

    result = await join_service.request_to_join_event(
        db_session, user, individual_event["join_code"], "referee"
    )
    assert result["success"] is False
    assert result["error"] == "validation"


@pytest.mark.asyncio
async def test_duplicate_request_while_pending(db_session, individual_event, make_user):
    user = await make_user("uma")
    code = individual_event["join_code"]
    await join_service.request_to_join_event(db_session, user, code, "player")

    second = await join_service.request_to_join_event(db_session, user, code, "player")

    assert second["success"] is False
    assert second["error"] == "conflict"
    assert second["message"] == "You already have a pending request for this event."
    requests = await join_service.get_join_requests(db_session, individual_event["id"])
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_duplicate_request_after_approval(db_session, individual_event, make_user, add_participant):
    user = await make_user("uma")
    await add_participant(individual_event, user)

    result = await join_service.request_to_join_event(
        db_session, user, individual_event["join_code"], "player"
    )
    assert result["error"] == "conflict"
    assert result["message"] == "You are already part of this event."


@pytest.mark.asyncio
async def test_duplicate_request_after_rejection(db_session, individual_event, make_user):
    user = await make_user("uma")
    code = individual_event["join_code"]
    first = await join_service.request_to_join_event(db_session, user, code, "player")
    await join_service.reject_join_request(
        db_session, individual_event["id"], first["request"]["id"]
    )

    result = await join_service.request_to_join_event(db_session, user, code, "player")
    assert result["error"] == "conflict"
    assert result["message"] == "Your previous request was rejected."


@pytest.mark.asyncio
async def test_approve_join_request(db_session, individual_event, make_user):
    user = await make_user("uma", "Uma")
    request = (
        await join_service.request_to_join_event(
            db_session, user, individual_event["join_code"], "coach"
        )
    )["request"]

    participant = await join_service.approve_join_request(
        db_session, individual_event["id"], request["id"]
    )

    assert participant["user_id"] == user["id"]
    assert participant["user_name"] == "Uma"
    assert participant["role"] == "coach"
    assert participant["team_id"] is None

    requests = await join_service.get_join_requests(db_session, individual_event["id"])
    assert requests[0]["status"] == "approved"
    assert requests[0]["reviewed_at"] is not None

    participants = await event_service.get_event_participants(db_session, individual_event["id"])
    assert [p["id"] for p in participants] == [participant["id"]]


@pytest.mark.asyncio
async def test_approve_twice_is_not_found(db_session, individual_event, make_user, add_participant):
    user = await make_user("uma")
    await add_participant(individual_event, user)
    request = (await join_service.get_join_requests(db_session, individual_event["id"]))[0]

    with pytest.raises(NotFound, match="already processed"):
        await join_service.approve_join_request(db_session, individual_event["id"], request["id"])


@pytest.mark.asyncio
async def test_approve_request_of_other_event(db_session, individual_event, team_event, make_user):
    user = await make_user("uma")
    request = (
        await join_service.request_to_join_event(
            db_session, user, individual_event["join_code"], "player"
        )
    )["request"]

    with pytest.raises(NotFound):
        await join_service.approve_join_request(db_session, team_event["id"], request["id"])


@pytest.mark.asyncio
async def test_get_join_requests_filtered(db_session, individual_event, make_user):
    code = individual_event["join_code"]
    alice = await make_user("alice")
    bob = await make_user("bob")
    await join_service.request_to_join_event(db_session, alice, code, "player")
    bob_request = (await join_service.request_to_join_event(db_session, bob, code, "player"))[
        "request"
    ]
    await join_service.reject_join_request(db_session, individual_event["id"], bob_request["id"])

    pending = await join_service.get_join_requests(
        db_session, individual_event["id"], status="pending"
    )
    rejected = await join_service.get_join_requests(
        db_session, individual_event["id"], status="rejected"
    )
    assert [r["user_id"] for r in pending] == [alice["id"]]
    assert [r["user_id"] for r in rejected] == [bob["id"]]

    with pytest.raises(ValidationError):
        await join_service.get_join_requests(db_session, individual_event["id"], status="maybe")
