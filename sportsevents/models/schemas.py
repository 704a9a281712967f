"""
Pydantic models for API request/response validation.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional, Type, Union
from pydantic import BaseModel, Field, ConfigDict, model_validator


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    message: str


# Authentication schemas


class RegisterRequest(BaseModel):
    """Request to register a new user."""

    username: str
    name: str
    password: str


class LoginRequest(BaseModel):
    """Request to login with username and password."""

    username: str
    password: str


class UserResponse(BaseModel):
    """Public user data (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    username: str
    name: str
    role: str
    created_at: Optional[str] = None


class AuthResponse(BaseModel):
    """Login response carrying the session bearer token."""

    access_token: str
    token_type: str = "bearer"
    expires_at: str
    user: UserResponse


class LogoutResponse(BaseModel):
    success: bool


# Event schemas


EventStatusValue = Literal["upcoming", "ongoing", "completed", "cancelled"]
SportValue = Literal[
    "basketball",
    "american-football",
    "football",
    "tennis",
    "volleyball",
    "cricket",
    "boxing",
    "swimming",
    "golf",
]
RoleValue = Literal["player", "coach", "admin"]


class EventCreate(BaseModel):
    """Request to create an event."""

    title: str
    description: str
    venue: str
    start_date: datetime
    end_date: Optional[datetime] = None  # Defaults to start_date
    sport: SportValue
    is_team_event: bool = False
    status: EventStatusValue = "upcoming"


class EventResponse(BaseModel):
    """Event response."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    title: str
    description: str
    sport: str
    venue: str
    start_date: str
    end_date: str
    status: str
    join_code: str
    is_team_event: bool
    created_by: Optional[int] = None
    created_at: Optional[str] = None


class JoinRequestResponse(BaseModel):
    """Join request response."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    event_id: int
    user_id: int
    user_name: str
    requested_role: str
    status: str
    requested_at: Optional[str] = None
    reviewed_at: Optional[str] = None


class ParticipantResponse(BaseModel):
    """Event participant response."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    event_id: int
    user_id: int
    user_name: str
    role: str
    team_id: Optional[int] = None
    joined_at: Optional[str] = None


class TeamCreate(BaseModel):
    """Request to create a team."""

    name: str


class TeamAssignRequest(BaseModel):
    """Request to assign a participant to a team."""

    participant_id: int
    team_id: int


class TeamResponse(BaseModel):
    """Team response. Members are participant ids in assignment order."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    event_id: int
    name: str
    members: List[int] = Field(default_factory=list)
    created_at: Optional[str] = None


class TeamAssignResponse(BaseModel):
    success: bool


class AnnouncementCreate(BaseModel):
    """Request to post an announcement."""

    title: str
    content: str
    priority: Literal["low", "medium", "high"] = "medium"


class AnnouncementResponse(BaseModel):
    """Announcement response."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    event_id: int
    event_title: Optional[str] = None
    title: str
    content: str
    priority: str
    created_by: Optional[int] = None
    created_by_name: str
    created_at: Optional[str] = None


class EventDetailResponse(EventResponse):
    """Event with its owned collections."""

    pending_requests: List[JoinRequestResponse] = Field(default_factory=list)
    participants: List[ParticipantResponse] = Field(default_factory=list)
    teams: List[TeamResponse] = Field(default_factory=list)
    announcements: List[AnnouncementResponse] = Field(default_factory=list)


class JoinEventRequest(BaseModel):
    """Request to join an event with its join code."""

    join_code: str
    requested_role: RoleValue = "player"


class JoinEventResponse(BaseModel):
    """Result of a join attempt."""

    success: bool
    message: str
    event_title: Optional[str] = None
    error: Optional[str] = None
    request: Optional[JoinRequestResponse] = None


# Sport-specific score variants (validate Match.detailed_score)


class BasketballScore(BaseModel):
    quarters: List[int] = Field(default_factory=list)
    total_points: int = 0
    fouls: int = 0
    timeouts: int = 0


class AmericanFootballScore(BaseModel):
    touchdowns: int = 0
    field_goals: int = 0
    safeties: int = 0
    total_points: int = 0
    yards: int = 0


class FootballScore(BaseModel):
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    possession: float = Field(default=0, ge=0, le=100)  # Percent


class TennisScore(BaseModel):
    sets: List[str] = Field(default_factory=list)
    games: List[int] = Field(default_factory=list)
    current_set: Optional[str] = None


class VolleyballScore(BaseModel):
    sets: List[int] = Field(default_factory=list)
    total_sets: int = 0
    points: int = 0


class CricketScore(BaseModel):
    runs: int = 0
    wickets: int = Field(default=0, ge=0, le=10)
    overs: int = 0
    balls: int = Field(default=0, ge=0, le=5)
    extras: int = 0


class BoxingScore(BaseModel):
    rounds: List[int] = Field(default_factory=list)
    knockdowns: int = 0
    total_points: int = 0
    result: Optional[Literal["KO", "TKO", "Decision", "Draw"]] = None


class SwimmingScore(BaseModel):
    time: str
    strokes: int = 0
    lane: int = Field(ge=1)


class GolfScore(BaseModel):
    holes: List[int] = Field(default_factory=list)
    total_strokes: int = 0
    par: int
    handicap: Optional[int] = None


SPORT_SCORE_MODELS: Dict[str, Type[BaseModel]] = {
    "basketball": BasketballScore,
    "american-football": AmericanFootballScore,
    "football": FootballScore,
    "tennis": TennisScore,
    "volleyball": VolleyballScore,
    "cricket": CricketScore,
    "boxing": BoxingScore,
    "swimming": SwimmingScore,
    "golf": GolfScore,
}


# Match schemas


ScoreValue = Union[int, float, str]


class MatchCreate(BaseModel):
    """
    Request to create a match.

    Exactly one side pair must be given: team_a_id/team_b_id for team events,
    player_a_id/player_b_id (participant ids) for individual events.
    """

    title: str
    start_time: datetime
    status: Literal["scheduled", "ongoing"] = "scheduled"
    sport: Optional[SportValue] = None  # Defaults to the event's sport
    notes: Optional[str] = None
    team_a_id: Optional[int] = None
    team_b_id: Optional[int] = None
    player_a_id: Optional[int] = None
    player_b_id: Optional[int] = None

    @model_validator(mode="after")
    def validate_sides(self):
        """Ensure exactly one complete, distinct side pair is provided."""
        has_teams = self.team_a_id is not None or self.team_b_id is not None
        has_players = self.player_a_id is not None or self.player_b_id is not None
        if has_teams and has_players:
            raise ValueError("Provide either teams or players, not both")
        if has_teams:
            if self.team_a_id is None or self.team_b_id is None:
                raise ValueError("Both team_a_id and team_b_id are required")
            if self.team_a_id == self.team_b_id:
                raise ValueError("A team cannot play against itself")
        elif has_players:
            if self.player_a_id is None or self.player_b_id is None:
                raise ValueError("Both player_a_id and player_b_id are required")
            if self.player_a_id == self.player_b_id:
                raise ValueError("A player cannot play against themselves")
        else:
            raise ValueError("Either teams or players must be provided")
        return self


class MatchStatusUpdate(BaseModel):
    """
    Request to change a match's status.

    Scores left out of the request body keep their stored value.
    """

    status: Literal["scheduled", "ongoing", "completed", "cancelled"]
    score_a: Optional[ScoreValue] = None
    score_b: Optional[ScoreValue] = None
    detailed_score: Optional[dict] = None


class MatchResponse(BaseModel):
    """Match response."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    event_id: int
    title: str
    team_a: str
    team_b: str
    team_a_id: Optional[int] = None
    team_b_id: Optional[int] = None
    player_a_id: Optional[int] = None
    player_b_id: Optional[int] = None
    score_a: Optional[ScoreValue] = None
    score_b: Optional[ScoreValue] = None
    detailed_score: Optional[dict] = None
    start_time: str
    end_time: Optional[str] = None
    status: str
    sport: str
    notes: Optional[str] = None
    created_at: Optional[str] = None


# Alert schemas
class AlertResponse(BaseModel):
    """Alert response."""

    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: int
    type: str
    title: str
    message: str
    event_id: Optional[int] = None
    event_title: Optional[str] = None
    match_id: Optional[int] = None
    announcement_id: Optional[int] = None
    link_url: Optional[str] = None
    is_read: bool
    read_at: Optional[str] = None
    created_at: str


class AlertListResponse(BaseModel):
    """Paginated alert list response."""

    alerts: List[AlertResponse]
    total_count: int
    has_more: bool


class UnreadCountResponse(BaseModel):
    """Unread alert count response."""

    count: int


class MarkAsReadResponse(BaseModel):
    success: bool


class MarkAllAsReadResponse(BaseModel):
    success: bool
    count: int
