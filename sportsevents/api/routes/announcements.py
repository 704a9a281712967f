"""Announcement route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.api.routes import service_error_response
from sportsevents.database.db import get_db_session
from sportsevents.services import announcement_service
from sportsevents.services.errors import ServiceError
from sportsevents.api.auth_dependencies import make_require_event_organizer, require_user
from sportsevents.models.schemas import AnnouncementCreate, AnnouncementResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/announcements", response_model=List[AnnouncementResponse])
async def list_announcements(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """List announcements across all events, newest first."""
    return await announcement_service.get_announcements(session)


@router.get("/api/events/{event_id}/announcements", response_model=List[AnnouncementResponse])
async def list_event_announcements(
    event_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """List an event's announcements, newest first."""
    try:
        return await announcement_service.get_announcements_by_event(session, event_id)
    except ServiceError as e:
        raise service_error_response(e)


@router.post("/api/events/{event_id}/announcements", response_model=AnnouncementResponse)
async def create_announcement(
    event_id: int,
    payload: AnnouncementCreate,
    user: dict = Depends(make_require_event_organizer()),
    session: AsyncSession = Depends(get_db_session),
):
    """Post an announcement; every participant gets an alert."""
    try:
        return await announcement_service.create_announcement(
            session,
            user,
            event_id,
            title=payload.title,
            content=payload.content,
            priority=payload.priority,
        )
    except ServiceError as e:
        raise service_error_response(e)
    except Exception as e:
        logger.error(f"Error creating announcement: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating announcement: {str(e)}")
