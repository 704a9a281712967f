"""Team route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.api.routes import service_error_response
from sportsevents.database.db import get_db_session
from sportsevents.services import team_service
from sportsevents.services.errors import ServiceError
from sportsevents.api.auth_dependencies import make_require_event_organizer, require_user
from sportsevents.models.schemas import (
    TeamCreate,
    TeamResponse,
    TeamAssignRequest,
    TeamAssignResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/events/{event_id}/teams", response_model=List[TeamResponse])
async def list_teams(
    event_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """List an event's teams with member participant ids."""
    try:
        return await team_service.get_event_teams(session, event_id)
    except ServiceError as e:
        raise service_error_response(e)


@router.post("/api/events/{event_id}/teams", response_model=TeamResponse)
async def create_team(
    event_id: int,
    payload: TeamCreate,
    user: dict = Depends(make_require_event_organizer()),
    session: AsyncSession = Depends(get_db_session),
):
    """Create an empty team."""
    try:
        return await team_service.create_team(session, event_id, payload.name)
    except ServiceError as e:
        raise service_error_response(e)
    except Exception as e:
        logger.error(f"Error creating team: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating team: {str(e)}")


@router.post("/api/events/{event_id}/teams/assign", response_model=TeamAssignResponse)
async def assign_participant(
    event_id: int,
    payload: TeamAssignRequest,
    user: dict = Depends(make_require_event_organizer()),
    session: AsyncSession = Depends(get_db_session),
):
    """Move a participant into a team, replacing any previous team."""
    try:
        success = await team_service.assign_participant_to_team(
            session, event_id, payload.participant_id, payload.team_id
        )
    except Exception as e:
        logger.error(f"Error assigning participant: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error assigning participant: {str(e)}")

    if not success:
        raise HTTPException(status_code=404, detail="Participant or team not found in this event")
    return {"success": True}
