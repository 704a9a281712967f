"""
Join-code workflow: join requests and their review by event organizers.
"""

from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sportsevents.database.models import (
    EventParticipant,
    JoinRequest,
    JoinRequestStatus,
    ParticipantRole,
)
from sportsevents.database.repository import Repository
from sportsevents.services.errors import NotFound, ValidationError
from sportsevents.services.event_service import find_event_by_join_code, require_event
from sportsevents.services.serializers import join_request_to_dict, participant_to_dict
from sportsevents.utils.datetime_utils import utcnow
import logging

logger = logging.getLogger(__name__)


_EXISTING_REQUEST_MESSAGES = {
    JoinRequestStatus.PENDING.value: "You already have a pending request for this event.",
    JoinRequestStatus.APPROVED.value: "You are already part of this event.",
    JoinRequestStatus.REJECTED.value: "Your previous request was rejected.",
}


def _join_result(
    success: bool,
    message: str,
    event_title: Optional[str] = None,
    error: Optional[str] = None,
    request: Optional[Dict] = None,
) -> Dict:
    return {
        "success": success,
        "message": message,
        "event_title": event_title,
        "error": error,
        "request": request,
    }


async def request_to_join_event(
    session: AsyncSession,
    user: Optional[Dict],
    join_code: str,
    requested_role: str = ParticipantRole.PLAYER.value,
) -> Dict:
    """
    Ask to join the event identified by a join code.

    Failures are reported in the result rather than raised; callers check
    ``success`` and, on failure, ``error`` (unauthorized, not_found, conflict,
    validation).

    Args:
        session: Database session
        user: Authenticated user dict, or None when nobody is logged in
        join_code: Event join code (case-insensitive)
        requested_role: ParticipantRole value the user asks for

    Returns:
        Dict with success, message, event_title, error and the created request
    """
    if not user:
        return _join_result(
            False, "You must be logged in to join an event.", error="unauthorized"
        )

    if requested_role not in {r.value for r in ParticipantRole}:
        return _join_result(
            False, f"Invalid role: {requested_role}", error="validation"
        )

    event = await find_event_by_join_code(session, join_code)
    if event is None:
        return _join_result(
            False, "Invalid join code. Please check and try again.", error="not_found"
        )

    existing = await Repository(session, JoinRequest).find_one(
        event_id=event.id, user_id=user["id"]
    )
    if existing is not None:
        return _join_result(
            False,
            _EXISTING_REQUEST_MESSAGES[existing.status],
            event_title=event.title,
            error="conflict",
        )

    request = await Repository(session, JoinRequest).create(
        event_id=event.id,
        user_id=user["id"],
        user_name=user["name"],
        requested_role=requested_role,
        status=JoinRequestStatus.PENDING.value,
    )
    request_dict = join_request_to_dict(request)
    event_title = event.title
    await session.commit()

    logger.info(f"User {user['id']} requested to join event {request_dict['event_id']}")
    return _join_result(
        True,
        f'Join request sent for "{event_title}" as {requested_role}. '
        f"Please wait for approval from the event organizer.",
        event_title=event_title,
        request=request_dict,
    )


async def get_join_requests(
    session: AsyncSession, event_id: int, status: Optional[str] = None
) -> List[Dict]:
    """
    List an event's join requests, optionally filtered by status.

    Raises:
        NotFound: If the event does not exist
        ValidationError: If status is not a JoinRequestStatus value
    """
    await require_event(session, event_id)
    filters = {"event_id": event_id}
    if status is not None:
        if status not in {s.value for s in JoinRequestStatus}:
            raise ValidationError(f"Invalid join request status: {status}")
        filters["status"] = status
    requests = await Repository(session, JoinRequest).find(**filters)
    return [join_request_to_dict(r) for r in requests]


async def _get_pending_request(
    session: AsyncSession, event_id: int, request_id: int
) -> JoinRequest:
    request = await Repository(session, JoinRequest).find_one(
        id=request_id, event_id=event_id
    )
    if request is None:
        raise NotFound("Join request not found")
    if request.status != JoinRequestStatus.PENDING.value:
        raise NotFound("Join request not found or already processed")
    return request


async def approve_join_request(session: AsyncSession, event_id: int, request_id: int) -> Dict:
    """
    Approve a pending join request.

    The requester becomes an EventParticipant with the requested role and the
    request is marked approved, in one commit.

    Returns:
        Created participant dict

    Raises:
        NotFound: If the event or a pending request does not exist
    """
    await require_event(session, event_id)
    request = await _get_pending_request(session, event_id, request_id)

    participant = await Repository(session, EventParticipant).create(
        event_id=event_id,
        user_id=request.user_id,
        user_name=request.user_name,
        role=request.requested_role,
    )
    await Repository(session, JoinRequest).update(
        request, status=JoinRequestStatus.APPROVED.value, reviewed_at=utcnow()
    )
    participant_dict = participant_to_dict(participant)
    await session.commit()

    logger.info(
        f"Approved join request {request_id}: user {participant_dict['user_id']} "
        f"joined event {event_id} as {participant_dict['role']}"
    )
    return participant_dict


async def reject_join_request(session: AsyncSession, event_id: int, request_id: int) -> Dict:
    """
    Reject a pending join request. The request is kept with status rejected.

    Returns:
        Updated join request dict

    Raises:
        NotFound: If the event or a pending request does not exist
    """
    await require_event(session, event_id)
    request = await _get_pending_request(session, event_id, request_id)
    await Repository(session, JoinRequest).update(
        request, status=JoinRequestStatus.REJECTED.value, reviewed_at=utcnow()
    )
    request_dict = join_request_to_dict(request)
    await session.commit()

    logger.info(f"Rejected join request {request_id} for event {event_id}")
    return request_dict
