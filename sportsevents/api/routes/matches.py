"""Match route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.api.routes import service_error_response
from sportsevents.database.db import get_db_session
from sportsevents.services import match_service
from sportsevents.services.errors import ServiceError
from sportsevents.api.auth_dependencies import (
    make_require_event_organizer,
    make_require_event_organizer_from_match,
    require_user,
)
from sportsevents.models.schemas import MatchCreate, MatchResponse, MatchStatusUpdate

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/matches", response_model=List[MatchResponse])
async def list_matches(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """List every match."""
    return await match_service.get_matches(session)


@router.get("/api/matches/{match_id}", response_model=MatchResponse)
async def get_match(
    match_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a match by id."""
    match = await match_service.get_match(session, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


@router.get("/api/events/{event_id}/matches", response_model=List[MatchResponse])
async def list_event_matches(
    event_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """List an event's matches by start time."""
    try:
        return await match_service.get_matches_by_event(session, event_id)
    except ServiceError as e:
        raise service_error_response(e)


@router.post("/api/events/{event_id}/matches", response_model=MatchResponse)
async def create_match(
    event_id: int,
    payload: MatchCreate,
    user: dict = Depends(make_require_event_organizer()),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Create a match and alert the players involved.

    Request body:
        {
            "title": "Semi-final",
            "start_time": "2026-05-01T18:00:00Z",
            "status": "scheduled",      // or "ongoing"
            "team_a_id": 1, "team_b_id": 2      // team events
            "player_a_id": 3, "player_b_id": 4  // individual events
        }
    """
    try:
        return await match_service.create_match(
            session,
            event_id,
            title=payload.title,
            start_time=payload.start_time,
            status=payload.status,
            sport=payload.sport,
            notes=payload.notes,
            team_a_id=payload.team_a_id,
            team_b_id=payload.team_b_id,
            player_a_id=payload.player_a_id,
            player_b_id=payload.player_b_id,
        )
    except ServiceError as e:
        raise service_error_response(e)
    except Exception as e:
        logger.error(f"Error creating match: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating match: {str(e)}")


@router.patch("/api/matches/{match_id}/status", response_model=MatchResponse)
async def update_match_status(
    match_id: int,
    payload: MatchStatusUpdate,
    user: dict = Depends(make_require_event_organizer_from_match()),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Change a match's status. Scores are only changed when present in the body.
    """
    scores = {
        field: getattr(payload, field)
        for field in ("score_a", "score_b", "detailed_score")
        if field in payload.model_fields_set
    }
    try:
        match = await match_service.update_match_status(
            session, match_id, payload.status, **scores
        )
    except ServiceError as e:
        raise service_error_response(e)
    except Exception as e:
        logger.error(f"Error updating match status: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating match status: {str(e)}")

    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return match
