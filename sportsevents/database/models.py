"""
SQLAlchemy ORM models for the sports event manager.
"""

import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Index,
    JSON,
)
from sqlalchemy.orm import relationship
from sportsevents.database.db import Base
from sportsevents.utils.datetime_utils import utcnow


class UserRole(str, enum.Enum):
    """User role enum. Only the system admin role remains."""

    ADMIN = "admin"


class EventStatus(str, enum.Enum):
    """Event status enum."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SportType(str, enum.Enum):
    """Supported sports."""

    BASKETBALL = "basketball"
    AMERICAN_FOOTBALL = "american-football"
    FOOTBALL = "football"
    TENNIS = "tennis"
    VOLLEYBALL = "volleyball"
    CRICKET = "cricket"
    BOXING = "boxing"
    SWIMMING = "swimming"
    GOLF = "golf"


class ParticipantRole(str, enum.Enum):
    """Role of a participant within one event."""

    PLAYER = "player"
    COACH = "coach"
    ADMIN = "admin"


class JoinRequestStatus(str, enum.Enum):
    """Join request status enum."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MatchStatus(str, enum.Enum):
    """Match status enum."""

    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AnnouncementPriority(str, enum.Enum):
    """Announcement priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertType(str, enum.Enum):
    """Alert type enum."""

    MATCH_UPCOMING = "match_upcoming"
    ANNOUNCEMENT = "announcement"
    TEAM_ASSIGNED = "team_assigned"
    EVENT_UPDATE = "event_update"
    MATCH_RESULT = "match_result"


class User(Base):
    """User accounts with username/password authentication."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, default=UserRole.ADMIN.value, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    login_sessions = relationship(
        "LoginSession", back_populates="user", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_users_username", "username"),)


class LoginSession(Base):
    """Server-side login sessions, one row per issued bearer token."""

    __tablename__ = "login_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    token = Column(String, nullable=False, unique=True)
    expires_at = Column(String, nullable=False)  # ISO timestamp
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    user = relationship("User", back_populates="login_sessions")

    __table_args__ = (
        Index("idx_login_sessions_token", "token"),
        Index("idx_login_sessions_user_id", "user_id"),
    )


class Event(Base):
    """Sports events. Anyone holding the join code may request to join."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    sport = Column(String, nullable=False, default=SportType.BASKETBALL.value)
    venue = Column(String, nullable=False, default="")
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String, nullable=False, default=EventStatus.UPCOMING.value)
    join_code = Column(String(8), nullable=False, unique=True)
    is_team_event = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    creator = relationship("User", foreign_keys=[created_by])
    join_requests = relationship(
        "JoinRequest", back_populates="event", order_by="JoinRequest.id"
    )
    participants = relationship(
        "EventParticipant", back_populates="event", order_by="EventParticipant.id"
    )
    teams = relationship("Team", back_populates="event", order_by="Team.id")
    announcements = relationship(
        "Announcement", back_populates="event", order_by="Announcement.id"
    )
    matches = relationship("Match", back_populates="event", order_by="Match.id")

    __table_args__ = (
        Index("idx_events_join_code", "join_code"),
        Index("idx_events_created_by", "created_by"),
    )


class JoinRequest(Base):
    """Requests to join an event, reviewed by the event organizers."""

    __tablename__ = "join_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user_name = Column(String, nullable=False)
    requested_role = Column(String, nullable=False, default=ParticipantRole.PLAYER.value)
    status = Column(String, default=JoinRequestStatus.PENDING.value, nullable=False)
    requested_at = Column(DateTime(timezone=True), default=utcnow)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    event = relationship("Event", back_populates="join_requests")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_join_request_event_user"),
        Index("idx_join_requests_event_id", "event_id"),
        Index("idx_join_requests_status", "status"),
    )


class EventParticipant(Base):
    """Approved members of an event."""

    __tablename__ = "event_participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user_name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ParticipantRole.PLAYER.value)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=True)
    team_assigned_at = Column(DateTime(timezone=True), nullable=True)
    joined_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    event = relationship("Event", back_populates="participants")
    team = relationship("Team", back_populates="members")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_participant_event_user"),
        Index("idx_event_participants_event_id", "event_id"),
        Index("idx_event_participants_team_id", "team_id"),
    )


class Team(Base):
    """
    Teams within a team event.

    Membership lives on EventParticipant.team_id, so a participant can only
    ever be in one team and moving them is a single write.
    """

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    event = relationship("Event", back_populates="teams")
    members = relationship(
        "EventParticipant",
        back_populates="team",
        order_by=[EventParticipant.team_assigned_at, EventParticipant.id],
    )

    __table_args__ = (Index("idx_teams_event_id", "event_id"),)


class Match(Base):
    """Matches between two teams (team event) or two participants (individual event)."""

    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    title = Column(String, nullable=False)
    team_a = Column(String, nullable=False)  # Display name of side A
    team_b = Column(String, nullable=False)  # Display name of side B
    team_a_id = Column(Integer, ForeignKey("teams.id"), nullable=True)
    team_b_id = Column(Integer, ForeignKey("teams.id"), nullable=True)
    player_a_id = Column(Integer, ForeignKey("event_participants.id"), nullable=True)
    player_b_id = Column(Integer, ForeignKey("event_participants.id"), nullable=True)
    score_a = Column(JSON, nullable=True)  # number or text
    score_b = Column(JSON, nullable=True)
    detailed_score = Column(JSON, nullable=True)  # sport-specific payload
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(String, nullable=False, default=MatchStatus.SCHEDULED.value)
    sport = Column(String, nullable=False, default=SportType.BASKETBALL.value)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    event = relationship("Event", back_populates="matches")

    __table_args__ = (
        Index("idx_matches_event_id", "event_id"),
        Index("idx_matches_status", "status"),
    )


class Announcement(Base):
    """Announcements posted to an event."""

    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default=AnnouncementPriority.MEDIUM.value)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_by_name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    event = relationship("Event", back_populates="announcements")

    __table_args__ = (Index("idx_announcements_event_id", "event_id"),)


class Alert(Base):
    """Per-user alerts produced by the notification fan-out."""

    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(String, nullable=False)  # AlertType enum value
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=True)
    event_title = Column(String, nullable=True)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=True)
    announcement_id = Column(Integer, ForeignKey("announcements.id"), nullable=True)
    link_url = Column(String(500), nullable=True)  # Navigation target
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    user = relationship("User")

    __table_args__ = (
        Index("idx_alerts_user_unread", "user_id", "is_read", "created_at"),
        Index("idx_alerts_user_created", "user_id", "created_at"),
    )
