"""
Announcement service.
"""

from typing import Dict, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sportsevents.database.models import Announcement, AnnouncementPriority, Event
from sportsevents.database.repository import Repository
from sportsevents.services.errors import ValidationError
from sportsevents.services.event_bus import AnnouncementPosted, get_event_bus
from sportsevents.services.event_service import require_event
from sportsevents.services.serializers import announcement_to_dict
import logging

logger = logging.getLogger(__name__)


async def create_announcement(
    session: AsyncSession,
    author: Dict,
    event_id: int,
    title: str,
    content: str,
    priority: str = AnnouncementPriority.MEDIUM.value,
) -> Dict:
    """
    Post an announcement to an event and alert its participants.

    Args:
        session: Database session
        author: Authenticated user dict posting the announcement
        event_id: ID of the event
        title: Announcement title
        content: Announcement body
        priority: AnnouncementPriority value

    Returns:
        Created announcement dict

    Raises:
        NotFound: If the event does not exist
        ValidationError: If title or content is blank, or priority is unknown
    """
    event = await require_event(session, event_id)
    if not title or not title.strip():
        raise ValidationError("Announcement title is required")
    if not content or not content.strip():
        raise ValidationError("Announcement content is required")
    if priority not in {p.value for p in AnnouncementPriority}:
        raise ValidationError(f"Invalid priority: {priority}")

    announcement = await Repository(session, Announcement).create(
        event_id=event_id,
        title=title.strip(),
        content=content,
        priority=priority,
        created_by=author["id"],
        created_by_name=author["name"],
    )

    announcement_dict = announcement_to_dict(announcement, event.title)
    await get_event_bus().publish(
        session, AnnouncementPosted(event_id=event_id, announcement_id=announcement.id)
    )
    await session.commit()

    logger.info(f"Posted announcement {announcement_dict['id']} to event {event_id}")
    return announcement_dict


async def get_announcements(session: AsyncSession) -> List[Dict]:
    """Get every announcement, newest first, with its event title."""
    result = await session.execute(
        select(Announcement, Event.title)
        .join(Event, Announcement.event_id == Event.id)
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
    )
    return [announcement_to_dict(a, event_title) for a, event_title in result.all()]


async def get_announcements_by_event(session: AsyncSession, event_id: int) -> List[Dict]:
    """
    Get an event's announcements, newest first.

    Raises:
        NotFound: If the event does not exist
    """
    event = await require_event(session, event_id)
    announcements = await Repository(session, Announcement).find(
        event_id=event_id,
        order_by=[Announcement.created_at.desc(), Announcement.id.desc()],
    )
    return [announcement_to_dict(a, event.title) for a in announcements]
