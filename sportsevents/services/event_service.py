"""
Event service: event creation, join codes, and event lookups.
"""

import logging
import secrets
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.database.models import (
    Announcement,
    Event,
    EventParticipant,
    EventStatus,
    JoinRequest,
    ParticipantRole,
    SportType,
    Team,
)
from sportsevents.database.repository import Repository
from sportsevents.services.errors import Forbidden, NotFound, ValidationError
from sportsevents.services.serializers import (
    announcement_to_dict,
    event_to_dict,
    join_request_to_dict,
    participant_to_dict,
    team_to_dict,
)
from sportsevents.utils.constants import JOIN_CODE_ALPHABET, JOIN_CODE_LENGTH
from sportsevents.utils.datetime_utils import as_utc

logger = logging.getLogger(__name__)


def generate_join_code() -> str:
    """
    Generate a candidate join code.

    Each of the 8 characters is sampled uniformly from A-Z and 0-9.
    """
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))


async def generate_unique_join_code(session: AsyncSession) -> str:
    """
    Generate a join code that no existing event uses.

    Retries until the code is unique. Collisions are negligible at expected
    scale, but callers must not assume a single attempt.
    """
    result = await session.execute(select(Event.join_code))
    existing_codes = {code.upper() for code in result.scalars().all()}

    code = generate_join_code()
    attempts = 1
    while code in existing_codes:
        code = generate_join_code()
        attempts += 1

    if attempts > 1:
        logger.info(f"Join code generated after {attempts} attempts")
    return code


async def create_event(
    session: AsyncSession,
    creator: Dict,
    title: str,
    description: str,
    venue: str,
    start_date: datetime,
    sport: str,
    end_date: Optional[datetime] = None,
    is_team_event: bool = False,
    status: str = EventStatus.UPCOMING.value,
) -> Dict:
    """
    Create an event with a freshly generated join code.

    Args:
        session: Database session
        creator: Authenticated user dict creating the event
        title: Event title
        description: Event description
        venue: Where the event takes place
        start_date: First day of the event
        sport: SportType value
        end_date: Last day of the event (defaults to start_date)
        is_team_event: Team-vs-individual mode, fixed for the life of the event
        status: Initial EventStatus value

    Returns:
        Created event dict

    Raises:
        ValidationError: If a required field is missing or inconsistent
    """
    if not title or not title.strip():
        raise ValidationError("Event title is required")
    if not description or not description.strip():
        raise ValidationError("Event description is required")
    if not venue or not venue.strip():
        raise ValidationError("Event venue is required")
    if start_date is None:
        raise ValidationError("Event start date is required")
    if sport not in {s.value for s in SportType}:
        raise ValidationError(f"Unsupported sport: {sport}")
    if status not in {s.value for s in EventStatus}:
        raise ValidationError(f"Invalid event status: {status}")

    start_date = as_utc(start_date)
    end_date = as_utc(end_date) if end_date is not None else start_date
    if end_date < start_date:
        raise ValidationError("Event end date cannot be before its start date")

    join_code = await generate_unique_join_code(session)
    event = await Repository(session, Event).create(
        title=title.strip(),
        description=description.strip(),
        venue=venue.strip(),
        sport=sport,
        start_date=start_date,
        end_date=end_date,
        status=status,
        join_code=join_code,
        is_team_event=bool(is_team_event),
        created_by=creator["id"] if creator else None,
    )
    event_dict = event_to_dict(event)
    await session.commit()

    logger.info(f"Created event {event_dict['id']} ({event_dict['title']}) with code {join_code}")
    return event_dict


async def get_events(session: AsyncSession) -> List[Dict]:
    """Get all events in creation order."""
    events = await Repository(session, Event).find()
    return [event_to_dict(event) for event in events]


async def get_event_model(session: AsyncSession, event_id: int) -> Optional[Event]:
    """Get the Event ORM instance, or None."""
    return await Repository(session, Event).get(event_id)


async def require_event(session: AsyncSession, event_id: int) -> Event:
    """
    Get the Event ORM instance.

    Raises:
        NotFound: If the event does not exist
    """
    event = await get_event_model(session, event_id)
    if event is None:
        raise NotFound("Event not found")
    return event


async def get_event(
    session: AsyncSession, event_id: int, include_details: bool = True
) -> Optional[Dict]:
    """
    Get an event by id.

    With ``include_details`` the event's owned collections are attached:
    join requests, participants, teams (with members) and announcements.
    """
    event = await get_event_model(session, event_id)
    if event is None:
        return None
    event_dict = event_to_dict(event)
    if include_details:
        event_dict.update(await _get_event_details(session, event))
    return event_dict


async def get_event_by_join_code(session: AsyncSession, join_code: str) -> Optional[Dict]:
    """Get an event by join code, ignoring case."""
    event = await find_event_by_join_code(session, join_code)
    return event_to_dict(event) if event else None


async def find_event_by_join_code(session: AsyncSession, join_code: str) -> Optional[Event]:
    """Get the Event ORM instance for a join code, ignoring case."""
    if not join_code or not join_code.strip():
        return None
    result = await session.execute(
        select(Event).where(func.upper(Event.join_code) == join_code.strip().upper()).limit(1)
    )
    return result.scalar_one_or_none()


async def get_event_participants(session: AsyncSession, event_id: int) -> List[Dict]:
    """Get all approved participants of an event in join order."""
    participants = await Repository(session, EventParticipant).find(event_id=event_id)
    return [participant_to_dict(p) for p in participants]


async def is_event_organizer(session: AsyncSession, event_id: int, user_id: int) -> bool:
    """
    Check whether a user organizes an event.

    Organizers are the event creator and participants with the admin role.
    """
    event = await get_event_model(session, event_id)
    if event is None:
        return False
    if event.created_by == user_id:
        return True
    admin = await Repository(session, EventParticipant).find_one(
        event_id=event_id, user_id=user_id, role=ParticipantRole.ADMIN.value
    )
    return admin is not None


async def require_event_organizer(session: AsyncSession, event_id: int, user_id: int) -> Event:
    """
    Get an event the user organizes.

    Raises:
        NotFound: If the event does not exist
        Forbidden: If the user is neither the creator nor an event admin
    """
    event = await require_event(session, event_id)
    if not await is_event_organizer(session, event_id, user_id):
        raise Forbidden("Event organizer access required")
    return event


async def _get_event_details(session: AsyncSession, event: Event) -> Dict:
    """Load the collections an event owns."""
    requests = await Repository(session, JoinRequest).find(event_id=event.id)
    participants = await Repository(session, EventParticipant).find(event_id=event.id)
    teams = await Repository(session, Team).find(event_id=event.id)
    announcements = await Repository(session, Announcement).find(event_id=event.id)

    members_by_team: Dict[int, List[EventParticipant]] = {}
    for participant in participants:
        if participant.team_id is not None:
            members_by_team.setdefault(participant.team_id, []).append(participant)

    def _member_ids(team_id: int) -> List[int]:
        members = members_by_team.get(team_id, [])
        members.sort(key=lambda p: (p.team_assigned_at is None, p.team_assigned_at, p.id))
        return [p.id for p in members]

    return {
        "pending_requests": [join_request_to_dict(r) for r in requests],
        "participants": [participant_to_dict(p) for p in participants],
        "teams": [team_to_dict(t, _member_ids(t.id)) for t in teams],
        "announcements": [announcement_to_dict(a, event.title) for a in announcements],
    }
