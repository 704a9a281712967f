"""
Match service: match creation, status/score updates, and lookups.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.database.models import EventParticipant, Match, MatchStatus, Team
from sportsevents.database.repository import Repository
from sportsevents.models.schemas import SPORT_SCORE_MODELS
from sportsevents.services.errors import ValidationError
from sportsevents.services.event_bus import MatchCreated, get_event_bus
from sportsevents.services.event_service import require_event
from sportsevents.services.serializers import match_to_dict
from sportsevents.utils.datetime_utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for arguments the caller did not supply."""

    def __repr__(self):
        return "UNSET"


UNSET: Any = _Unset()

INITIAL_MATCH_STATUSES = {MatchStatus.SCHEDULED.value, MatchStatus.ONGOING.value}
DETAILED_SCORE_SIDES = ("side_a", "side_b")


def validate_detailed_score(sport: str, detailed_score: Optional[Dict]) -> Optional[Dict]:
    """
    Validate a sport-specific score payload.

    The payload maps ``side_a`` and/or ``side_b`` to the score variant of the
    match's sport (see SPORT_SCORE_MODELS).

    Returns:
        Normalized payload, or None

    Raises:
        ValidationError: If the payload does not fit the sport's variant
    """
    if detailed_score is None:
        return None
    if not isinstance(detailed_score, dict):
        raise ValidationError("detailed_score must be an object")

    unknown = set(detailed_score) - set(DETAILED_SCORE_SIDES)
    if unknown:
        raise ValidationError(
            f"detailed_score keys must be side_a/side_b, got: {', '.join(sorted(unknown))}"
        )

    score_model = SPORT_SCORE_MODELS.get(sport)
    if score_model is None:
        raise ValidationError(f"No score format for sport: {sport}")

    normalized = {}
    for side, payload in detailed_score.items():
        try:
            normalized[side] = score_model.model_validate(payload).model_dump()
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {sport} score for {side}: {e.errors()[0]['msg']}")
    return normalized


async def _resolve_team_sides(
    session: AsyncSession, event_id: int, team_a_id: int, team_b_id: int
) -> List[Team]:
    teams = []
    for team_id in (team_a_id, team_b_id):
        team = await Repository(session, Team).find_one(id=team_id, event_id=event_id)
        if team is None:
            raise ValidationError(f"Team {team_id} does not belong to this event")
        teams.append(team)
    return teams


async def _resolve_player_sides(
    session: AsyncSession, event_id: int, player_a_id: int, player_b_id: int
) -> List[EventParticipant]:
    players = []
    for participant_id in (player_a_id, player_b_id):
        player = await Repository(session, EventParticipant).find_one(
            id=participant_id, event_id=event_id
        )
        if player is None:
            raise ValidationError(f"Participant {participant_id} does not belong to this event")
        players.append(player)
    return players


async def create_match(
    session: AsyncSession,
    event_id: int,
    title: str,
    start_time: datetime,
    status: str = MatchStatus.SCHEDULED.value,
    sport: Optional[str] = None,
    notes: Optional[str] = None,
    team_a_id: Optional[int] = None,
    team_b_id: Optional[int] = None,
    player_a_id: Optional[int] = None,
    player_b_id: Optional[int] = None,
) -> Dict:
    """
    Create a match between two teams (team event) or two participants
    (individual event) and fan out match_upcoming alerts.

    Args:
        session: Database session
        event_id: ID of the event
        title: Match title
        start_time: Scheduled start
        status: Initial status, scheduled or ongoing
        sport: SportType value (defaults to the event's sport)
        notes: Optional free text
        team_a_id, team_b_id: Team sides (team events)
        player_a_id, player_b_id: Participant sides (individual events)

    Returns:
        Created match dict

    Raises:
        NotFound: If the event does not exist
        ValidationError: If the sides or fields are invalid
    """
    event = await require_event(session, event_id)

    if not title or not title.strip():
        raise ValidationError("Match title is required")
    if start_time is None:
        raise ValidationError("Match start time is required")
    if status not in INITIAL_MATCH_STATUSES:
        raise ValidationError("A new match must be scheduled or ongoing")
    sport = sport or event.sport
    if sport not in SPORT_SCORE_MODELS:
        raise ValidationError(f"Unsupported sport: {sport}")

    team_pair = (team_a_id, team_b_id)
    player_pair = (player_a_id, player_b_id)
    has_teams = any(side is not None for side in team_pair)
    has_players = any(side is not None for side in player_pair)
    if has_teams == has_players:
        raise ValidationError("Provide exactly one side pair: teams or players")

    if has_teams:
        if not event.is_team_event:
            raise ValidationError("Individual events take players, not teams")
        if None in team_pair:
            raise ValidationError("Both teams are required")
        if team_a_id == team_b_id:
            raise ValidationError("A team cannot play against itself")
        side_a, side_b = await _resolve_team_sides(session, event_id, team_a_id, team_b_id)
        team_a, team_b = side_a.name, side_b.name
    else:
        if event.is_team_event:
            raise ValidationError("Team events take teams, not players")
        if None in player_pair:
            raise ValidationError("Both players are required")
        if player_a_id == player_b_id:
            raise ValidationError("A player cannot play against themselves")
        side_a, side_b = await _resolve_player_sides(session, event_id, player_a_id, player_b_id)
        team_a, team_b = side_a.user_name, side_b.user_name

    match = await Repository(session, Match).create(
        event_id=event_id,
        title=title.strip(),
        team_a=team_a,
        team_b=team_b,
        team_a_id=team_a_id,
        team_b_id=team_b_id,
        player_a_id=player_a_id,
        player_b_id=player_b_id,
        start_time=as_utc(start_time),
        status=status,
        sport=sport,
        notes=notes,
    )

    match_dict = match_to_dict(match)
    await get_event_bus().publish(session, MatchCreated(event_id=event_id, match_id=match.id))
    await session.commit()

    logger.info(f"Created match {match_dict['id']} in event {event_id}: {team_a} vs {team_b}")
    return match_dict


async def update_match_status(
    session: AsyncSession,
    match_id: int,
    status: str,
    score_a: Any = UNSET,
    score_b: Any = UNSET,
    detailed_score: Any = UNSET,
) -> Optional[Dict]:
    """
    Change a match's status and, when supplied, its scores.

    Any status may follow any other. Moving into completed stamps end_time;
    other transitions leave end_time alone. Scores not passed keep their
    stored value; passing None clears them.

    Returns:
        Updated match dict, or None if the match does not exist

    Raises:
        ValidationError: If the status or detailed score is invalid
    """
    if status not in {s.value for s in MatchStatus}:
        raise ValidationError(f"Invalid match status: {status}")

    match = await Repository(session, Match).get(match_id)
    if match is None:
        return None

    values = {"status": status}
    if score_a is not UNSET:
        values["score_a"] = score_a
    if score_b is not UNSET:
        values["score_b"] = score_b
    if detailed_score is not UNSET:
        values["detailed_score"] = validate_detailed_score(match.sport, detailed_score)
    if status == MatchStatus.COMPLETED.value:
        values["end_time"] = utcnow()

    previous_status = match.status
    await Repository(session, Match).update(match, **values)
    match_dict = match_to_dict(match)
    await session.commit()

    logger.info(f"Match {match_id} status {previous_status} -> {status}")
    return match_dict


async def get_match(session: AsyncSession, match_id: int) -> Optional[Dict]:
    """Get a match by id."""
    match = await Repository(session, Match).get(match_id)
    return match_to_dict(match) if match else None


async def get_matches(session: AsyncSession) -> List[Dict]:
    """Get all matches in creation order."""
    matches = await Repository(session, Match).find()
    return [match_to_dict(match) for match in matches]


async def get_matches_by_event(session: AsyncSession, event_id: int) -> List[Dict]:
    """
    Get an event's matches ordered by start time.

    Raises:
        NotFound: If the event does not exist
    """
    await require_event(session, event_id)
    matches = await Repository(session, Match).find(
        event_id=event_id, order_by=[Match.start_time, Match.id]
    )
    return [match_to_dict(match) for match in matches]
