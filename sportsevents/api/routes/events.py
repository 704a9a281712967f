"""Event, join-code and join-request route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.api.routes import service_error_response
from sportsevents.database.db import get_db_session
from sportsevents.services import event_service, join_service
from sportsevents.services.errors import ServiceError
from sportsevents.api.auth_dependencies import (
    get_current_user_optional,
    make_require_event_organizer,
    require_user,
)
from sportsevents.models.schemas import (
    EventCreate,
    EventResponse,
    EventDetailResponse,
    JoinEventRequest,
    JoinEventResponse,
    JoinRequestResponse,
    ParticipantResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()

JOIN_ERROR_STATUS = {
    "unauthorized": 401,
    "not_found": 404,
    "conflict": 409,
    "validation": 422,
}


@router.get("/api/events", response_model=List[EventResponse])
async def list_events(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """List all events."""
    try:
        return await event_service.get_events(session)
    except Exception as e:
        logger.error(f"Error listing events: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error listing events: {str(e)}")


@router.post("/api/events", response_model=EventResponse)
async def create_event(
    payload: EventCreate,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Create an event. The caller becomes its organizer."""
    try:
        return await event_service.create_event(
            session,
            user,
            title=payload.title,
            description=payload.description,
            venue=payload.venue,
            start_date=payload.start_date,
            end_date=payload.end_date,
            sport=payload.sport,
            is_team_event=payload.is_team_event,
            status=payload.status,
        )
    except ServiceError as e:
        raise service_error_response(e)
    except Exception as e:
        logger.error(f"Error creating event: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating event: {str(e)}")


@router.get("/api/events/by-code/{join_code}", response_model=EventResponse)
async def get_event_by_join_code(
    join_code: str,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Look up an event by its join code (case-insensitive)."""
    event = await event_service.get_event_by_join_code(session, join_code)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("/api/events/join", response_model=JoinEventResponse)
async def join_event(
    payload: JoinEventRequest,
    user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Request to join an event with its join code.

    Failures come back as the same result body with a matching error status.
    """
    try:
        result = await join_service.request_to_join_event(
            session, user, payload.join_code, payload.requested_role
        )
    except Exception as e:
        logger.error(f"Error joining event: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error joining event: {str(e)}")

    if not result["success"]:
        raise HTTPException(
            status_code=JOIN_ERROR_STATUS.get(result["error"], 400), detail=result
        )
    return result


@router.get("/api/events/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get an event with its requests, participants, teams and announcements."""
    event = await event_service.get_event(session, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/api/events/{event_id}/participants", response_model=List[ParticipantResponse])
async def list_participants(
    event_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """List an event's approved participants."""
    try:
        await event_service.require_event(session, event_id)
        return await event_service.get_event_participants(session, event_id)
    except ServiceError as e:
        raise service_error_response(e)


@router.get("/api/events/{event_id}/join-requests", response_model=List[JoinRequestResponse])
async def list_join_requests(
    event_id: int,
    status: Optional[str] = None,
    user: dict = Depends(make_require_event_organizer()),
    session: AsyncSession = Depends(get_db_session),
):
    """List an event's join requests, optionally filtered by status."""
    try:
        return await join_service.get_join_requests(session, event_id, status=status)
    except ServiceError as e:
        raise service_error_response(e)


@router.post(
    "/api/events/{event_id}/join-requests/{request_id}/approve",
    response_model=ParticipantResponse,
)
async def approve_join_request(
    event_id: int,
    request_id: int,
    user: dict = Depends(make_require_event_organizer()),
    session: AsyncSession = Depends(get_db_session),
):
    """Approve a pending join request, making the requester a participant."""
    try:
        return await join_service.approve_join_request(session, event_id, request_id)
    except ServiceError as e:
        raise service_error_response(e)
    except Exception as e:
        logger.error(f"Error approving join request: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error approving join request: {str(e)}")


@router.post(
    "/api/events/{event_id}/join-requests/{request_id}/reject",
    response_model=JoinRequestResponse,
)
async def reject_join_request(
    event_id: int,
    request_id: int,
    user: dict = Depends(make_require_event_organizer()),
    session: AsyncSession = Depends(get_db_session),
):
    """Reject a pending join request."""
    try:
        return await join_service.reject_join_request(session, event_id, request_id)
    except ServiceError as e:
        raise service_error_response(e)
    except Exception as e:
        logger.error(f"Error rejecting join request: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error rejecting join request: {str(e)}")
