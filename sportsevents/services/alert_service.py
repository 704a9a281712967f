"""
Alert service: per-user alerts and the fan-out that produces them.

Alerts are never created by a user action. The subscribers at the bottom of
this module turn TeamAssigned, MatchCreated and AnnouncementPosted domain
events into alerts for every affected user.
"""

from typing import List, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, and_
from sportsevents.database.models import (
    Alert,
    AlertType,
    Announcement,
    Event,
    EventParticipant,
    Match,
    Team,
)
from sportsevents.database.repository import Repository
from sportsevents.services.event_bus import (
    AnnouncementPosted,
    EventBus,
    MatchCreated,
    TeamAssigned,
    get_event_bus,
)
from sportsevents.services.serializers import alert_to_dict
from sportsevents.utils.constants import ALERT_PREVIEW_LENGTH, ALERT_PREVIEW_SUFFIX
from sportsevents.utils.datetime_utils import utcnow
import logging

logger = logging.getLogger(__name__)


async def create_alerts_bulk(session: AsyncSession, alerts_list: List[Dict]) -> List[Dict]:
    """
    Create several alerts at once. Every alert starts unread.

    Args:
        session: Database session
        alerts_list: List of alert dicts, each containing:
            - user_id (int, required)
            - type (str, required)
            - title (str, required)
            - message (str, required)
            - event_id, event_title, match_id, announcement_id, link_url (optional)

    Returns:
        List of created alert dicts

    Raises:
        ValueError: If any alert data is invalid
    """
    if not alerts_list:
        return []

    alert_objects = []
    for alert_data in alerts_list:
        if not alert_data.get("user_id"):
            raise ValueError("user_id is required for all alerts")
        if alert_data.get("type") not in {t.value for t in AlertType}:
            raise ValueError(f"Invalid alert type: {alert_data.get('type')}")
        if not alert_data.get("title"):
            raise ValueError("title is required for all alerts")
        if not alert_data.get("message"):
            raise ValueError("message is required for all alerts")

        alert_objects.append(
            Alert(
                user_id=alert_data["user_id"],
                type=alert_data["type"],
                title=alert_data["title"],
                message=alert_data["message"],
                event_id=alert_data.get("event_id"),
                event_title=alert_data.get("event_title"),
                match_id=alert_data.get("match_id"),
                announcement_id=alert_data.get("announcement_id"),
                link_url=alert_data.get("link_url"),
                is_read=False,
            )
        )

    session.add_all(alert_objects)
    await session.flush()

    return [alert_to_dict(alert) for alert in alert_objects]


async def get_user_alerts(
    session: AsyncSession,
    user_id: int,
    limit: int = 50,
    offset: int = 0,
    unread_only: bool = False,
) -> Dict:
    """
    Fetch a user's alerts, newest first, with pagination.

    Args:
        session: Database session
        user_id: ID of the user
        limit: Maximum number of alerts to return (default: 50)
        offset: Number of alerts to skip (default: 0)
        unread_only: If True, only return unread alerts (default: False)

    Returns:
        Dict containing:
            - alerts: List of alert dicts (ordered by created_at DESC)
            - total_count: Total number of alerts matching the criteria
            - has_more: Boolean indicating if there are more alerts
    """
    query = select(Alert).where(Alert.user_id == user_id)

    if unread_only:
        query = query.where(Alert.is_read == False)  # noqa: E712

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await session.execute(count_query)
    total_count = total_result.scalar_one() or 0

    # id breaks ties between alerts created by the same fan-out
    query = (
        query.order_by(Alert.created_at.desc(), Alert.id.desc())
        .limit(limit)
        .offset(offset)
    )
    result = await session.execute(query)
    alert_dicts = [alert_to_dict(alert) for alert in result.scalars().all()]

    return {
        "alerts": alert_dicts,
        "total_count": total_count,
        "has_more": (offset + len(alert_dicts)) < total_count,
    }


async def get_unread_count(session: AsyncSession, user_id: int) -> int:
    """
    Get count of unread alerts for a user.

    Args:
        session: Database session
        user_id: ID of the user

    Returns:
        Integer count of unread alerts
    """
    result = await session.execute(
        select(func.count())
        .select_from(Alert)
        .where(and_(Alert.user_id == user_id, Alert.is_read == False))  # noqa: E712
    )
    return result.scalar_one() or 0


async def mark_as_read(session: AsyncSession, alert_id: int, user_id: int) -> bool:
    """
    Mark a single alert as read.

    Marking an already-read alert is a no-op success.

    Args:
        session: Database session
        alert_id: ID of the alert
        user_id: ID of the user (only their own alerts can be marked)

    Returns:
        True if the alert belongs to the user, False if not found
    """
    alert = await Repository(session, Alert).find_one(id=alert_id, user_id=user_id)
    if alert is None:
        return False

    if not alert.is_read:
        await Repository(session, Alert).update(alert, is_read=True, read_at=utcnow())
        await session.commit()
    return True


async def mark_all_as_read(session: AsyncSession, user_id: int) -> int:
    """
    Mark all of a user's alerts as read.

    Args:
        session: Database session
        user_id: ID of the user

    Returns:
        Count of alerts marked as read (0 when none were unread)
    """
    result = await session.execute(
        update(Alert)
        .where(and_(Alert.user_id == user_id, Alert.is_read == False))  # noqa: E712
        .values(is_read=True, read_at=utcnow())
    )
    count = result.rowcount or 0
    await session.commit()
    return count


def truncate_preview(text: str) -> str:
    """Shorten text for an alert message, marking the cut with an ellipsis."""
    if len(text) <= ALERT_PREVIEW_LENGTH:
        return text
    return f"{text[:ALERT_PREVIEW_LENGTH]}{ALERT_PREVIEW_SUFFIX}"


#
# Fan-out subscribers
# Each one receives the publishing service's session, so the alerts are
# committed together with the mutation that caused them.
#


async def on_team_assigned(session: AsyncSession, domain_event: TeamAssigned) -> None:
    """Alert the reassigned participant's user about their new team."""
    participant = await Repository(session, EventParticipant).get(domain_event.participant_id)
    team = await Repository(session, Team).get(domain_event.team_id)
    event = await Repository(session, Event).get(domain_event.event_id)
    if participant is None or team is None or event is None:
        logger.warning(f"Skipping team assignment alert, missing entity for {domain_event}")
        return

    await create_alerts_bulk(
        session,
        [
            {
                "user_id": participant.user_id,
                "type": AlertType.TEAM_ASSIGNED.value,
                "title": "Team Assignment",
                "message": f'You have been assigned to team "{team.name}" for event "{event.title}"',
                "event_id": event.id,
                "event_title": event.title,
                "link_url": f"/events/{event.id}",
            }
        ],
    )


async def on_match_created(session: AsyncSession, domain_event: MatchCreated) -> None:
    """
    Alert everyone playing in a new match.

    Individual events alert both players; team events alert every member of
    both teams. Each message names the opposing side.
    """
    match = await Repository(session, Match).get(domain_event.match_id)
    event = await Repository(session, Event).get(domain_event.event_id)
    if match is None or event is None:
        logger.warning(f"Skipping match alerts, missing entity for {domain_event}")
        return

    base = {
        "type": AlertType.MATCH_UPCOMING.value,
        "event_id": event.id,
        "event_title": event.title,
        "match_id": match.id,
        "link_url": f"/events/{event.id}/matches/{match.id}",
    }

    alerts_list = []
    if match.team_a_id is not None and match.team_b_id is not None:
        sides = [
            (match.team_a_id, match.team_a, match.team_b),
            (match.team_b_id, match.team_b, match.team_a),
        ]
        for team_id, team_name, opponent in sides:
            members = await Repository(session, EventParticipant).find(
                team_id=team_id,
                order_by=[EventParticipant.team_assigned_at, EventParticipant.id],
            )
            for member in members:
                alerts_list.append(
                    {
                        **base,
                        "user_id": member.user_id,
                        "title": "New Team Match Scheduled",
                        "message": f'Your team "{team_name}" has a match: "{match.title}" vs {opponent}',
                    }
                )
    else:
        sides = [
            (match.player_a_id, match.team_b),
            (match.player_b_id, match.team_a),
        ]
        for participant_id, opponent in sides:
            player = await Repository(session, EventParticipant).get(participant_id)
            if player is None:
                continue
            alerts_list.append(
                {
                    **base,
                    "user_id": player.user_id,
                    "title": "New Match Scheduled",
                    "message": f'You have a match: "{match.title}" vs {opponent}',
                }
            )

    await create_alerts_bulk(session, alerts_list)
    logger.debug(f"Created {len(alerts_list)} match alert(s) for match {match.id}")


async def on_announcement_posted(session: AsyncSession, domain_event: AnnouncementPosted) -> None:
    """Alert every current participant of the event about a new announcement."""
    announcement = await Repository(session, Announcement).get(domain_event.announcement_id)
    event = await Repository(session, Event).get(domain_event.event_id)
    if announcement is None or event is None:
        logger.warning(f"Skipping announcement alerts, missing entity for {domain_event}")
        return

    participants = await Repository(session, EventParticipant).find(event_id=event.id)
    alerts_list = [
        {
            "user_id": participant.user_id,
            "type": AlertType.ANNOUNCEMENT.value,
            "title": f"New Announcement: {announcement.title}",
            "message": truncate_preview(announcement.content),
            "event_id": event.id,
            "event_title": event.title,
            "announcement_id": announcement.id,
            "link_url": f"/events/{event.id}/announcements",
        }
        for participant in participants
    ]

    await create_alerts_bulk(session, alerts_list)
    logger.debug(f"Created {len(alerts_list)} announcement alert(s) for event {event.id}")


def register_alert_subscribers(bus: Optional[EventBus] = None) -> None:
    """Subscribe the alert fan-out to the event bus (global bus by default)."""
    bus = bus or get_event_bus()
    bus.subscribe(TeamAssigned, on_team_assigned)
    bus.subscribe(MatchCreated, on_match_created)
    bus.subscribe(AnnouncementPosted, on_announcement_posted)
