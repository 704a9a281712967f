"""
Team service: team creation and participant assignment.

Membership is stored on EventParticipant.team_id, so moving a participant
from one team to another is one UPDATE; nobody can observe the participant
in both teams or in neither.
"""

from typing import Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sportsevents.database.models import EventParticipant, Team
from sportsevents.database.repository import Repository
from sportsevents.services.errors import ValidationError
from sportsevents.services.event_bus import TeamAssigned, get_event_bus
from sportsevents.services.event_service import get_event_model, require_event
from sportsevents.services.serializers import team_to_dict
from sportsevents.utils.datetime_utils import utcnow
import logging

logger = logging.getLogger(__name__)


async def create_team(session: AsyncSession, event_id: int, name: str) -> Dict:
    """
    Create an empty team within an event.

    Team names are not required to be unique within an event.

    Args:
        session: Database session
        event_id: ID of the event
        name: Team name

    Returns:
        Created team dict (members is empty)

    Raises:
        NotFound: If the event does not exist
        ValidationError: If the name is blank
    """
    if not name or not name.strip():
        raise ValidationError("Team name is required")
    await require_event(session, event_id)

    team = await Repository(session, Team).create(event_id=event_id, name=name.strip())
    team_dict = team_to_dict(team, [])
    await session.commit()

    logger.info(f"Created team {team_dict['id']} ({team_dict['name']}) in event {event_id}")
    return team_dict


async def get_team_member_ids(session: AsyncSession, team_id: int) -> List[int]:
    """Participant ids of a team, in assignment order."""
    members = await Repository(session, EventParticipant).find(
        team_id=team_id,
        order_by=[EventParticipant.team_assigned_at, EventParticipant.id],
    )
    return [member.id for member in members]


async def get_event_teams(session: AsyncSession, event_id: int) -> List[Dict]:
    """
    Get an event's teams with their member participant ids.

    Raises:
        NotFound: If the event does not exist
    """
    await require_event(session, event_id)
    teams = await Repository(session, Team).find(event_id=event_id)
    return [team_to_dict(team, await get_team_member_ids(session, team.id)) for team in teams]


async def assign_participant_to_team(
    session: AsyncSession, event_id: int, participant_id: int, team_id: int
) -> bool:
    """
    Move a participant into a team of the same event.

    Any previous membership ends with the same write. On success a
    TeamAssigned event is published, and the resulting alert is committed
    together with the assignment.

    Args:
        session: Database session
        event_id: ID of the event
        participant_id: ID of the EventParticipant
        team_id: ID of the target team

    Returns:
        True on success, False if the event, participant or team is not
        found within that event
    """
    event = await get_event_model(session, event_id)
    if event is None:
        return False

    participant = await Repository(session, EventParticipant).find_one(
        id=participant_id, event_id=event_id
    )
    team = await Repository(session, Team).find_one(id=team_id, event_id=event_id)
    if participant is None or team is None:
        logger.debug(
            f"Cannot assign participant {participant_id} to team {team_id} in event {event_id}"
        )
        return False

    previous_team_id = participant.team_id
    await Repository(session, EventParticipant).update(
        participant, team_id=team.id, team_assigned_at=utcnow()
    )

    await get_event_bus().publish(
        session,
        TeamAssigned(
            event_id=event_id,
            participant_id=participant.id,
            team_id=team.id,
            previous_team_id=previous_team_id,
        ),
    )
    await session.commit()

    if previous_team_id is not None and previous_team_id != team_id:
        logger.info(
            f"Moved participant {participant_id} from team {previous_team_id} to team {team_id}"
        )
    else:
        logger.info(f"Assigned participant {participant_id} to team {team_id}")
    return True
