"""
ORM instance -> dictionary conversion shared by the service layer.

Dictionaries mirror the response models in sportsevents.models.schemas.
"""

from typing import Dict, List, Optional

from sportsevents.database.models import (
    Alert,
    Announcement,
    Event,
    EventParticipant,
    JoinRequest,
    Match,
    Team,
)
from sportsevents.utils.datetime_utils import to_iso


def event_to_dict(event: Event) -> Dict:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "sport": event.sport,
        "venue": event.venue,
        "start_date": to_iso(event.start_date),
        "end_date": to_iso(event.end_date),
        "status": event.status,
        "join_code": event.join_code,
        "is_team_event": event.is_team_event,
        "created_by": event.created_by,
        "created_at": to_iso(event.created_at),
    }


def join_request_to_dict(request: JoinRequest) -> Dict:
    return {
        "id": request.id,
        "event_id": request.event_id,
        "user_id": request.user_id,
        "user_name": request.user_name,
        "requested_role": request.requested_role,
        "status": request.status,
        "requested_at": to_iso(request.requested_at),
        "reviewed_at": to_iso(request.reviewed_at),
    }


def participant_to_dict(participant: EventParticipant) -> Dict:
    return {
        "id": participant.id,
        "event_id": participant.event_id,
        "user_id": participant.user_id,
        "user_name": participant.user_name,
        "role": participant.role,
        "team_id": participant.team_id,
        "joined_at": to_iso(participant.joined_at),
    }


def team_to_dict(team: Team, member_ids: Optional[List[int]] = None) -> Dict:
    """
    Convert a team; ``member_ids`` are participant ids in assignment order.
    """
    return {
        "id": team.id,
        "event_id": team.event_id,
        "name": team.name,
        "members": list(member_ids or []),
        "created_at": to_iso(team.created_at),
    }


def match_to_dict(match: Match) -> Dict:
    return {
        "id": match.id,
        "event_id": match.event_id,
        "title": match.title,
        "team_a": match.team_a,
        "team_b": match.team_b,
        "team_a_id": match.team_a_id,
        "team_b_id": match.team_b_id,
        "player_a_id": match.player_a_id,
        "player_b_id": match.player_b_id,
        "score_a": match.score_a,
        "score_b": match.score_b,
        "detailed_score": match.detailed_score,
        "start_time": to_iso(match.start_time),
        "end_time": to_iso(match.end_time),
        "status": match.status,
        "sport": match.sport,
        "notes": match.notes,
        "created_at": to_iso(match.created_at),
    }


def announcement_to_dict(announcement: Announcement, event_title: Optional[str] = None) -> Dict:
    return {
        "id": announcement.id,
        "event_id": announcement.event_id,
        "event_title": event_title,
        "title": announcement.title,
        "content": announcement.content,
        "priority": announcement.priority,
        "created_by": announcement.created_by,
        "created_by_name": announcement.created_by_name,
        "created_at": to_iso(announcement.created_at),
    }


def alert_to_dict(alert: Alert) -> Dict:
    return {
        "id": alert.id,
        "user_id": alert.user_id,
        "type": alert.type,
        "title": alert.title,
        "message": alert.message,
        "event_id": alert.event_id,
        "event_title": alert.event_title,
        "match_id": alert.match_id,
        "announcement_id": alert.announcement_id,
        "link_url": alert.link_url,
        "is_read": alert.is_read,
        "read_at": to_iso(alert.read_at),
        "created_at": to_iso(alert.created_at),
    }
