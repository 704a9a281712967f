"""
Authentication dependencies for FastAPI routes.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sportsevents.services import event_service, user_service
from sportsevents.services.errors import ServiceError
from sportsevents.database.db import get_db_session
from sportsevents.database.models import Match

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Dependency returning the bearer token of the request.

    Raises:
        HTTPException: 401 if no bearer token was sent
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    return credentials.credentials


async def get_current_user(
    session: AsyncSession = Depends(get_db_session),
    token: str = Depends(get_current_token),
) -> dict:
    """
    Dependency to get the current authenticated user from their login session.

    Args:
        session: Database session
        token: Bearer token identifying the login session

    Returns:
        User dictionary (without the password hash)

    Raises:
        HTTPException: If the session is unknown or expired, or the user is gone
    """
    login_session = await user_service.get_login_session(session, token)
    if login_session is None:
        raise _unauthorized("Invalid or expired session")

    user = await user_service.get_user_by_id(session, login_session["user_id"])
    if user is None:
        raise _unauthorized("User not found")

    return user_service.public_user(user)


async def get_current_user_optional(
    session: AsyncSession = Depends(get_db_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """
    Optional dependency to get the current authenticated user.
    Returns None if no token is provided or the session is invalid.
    """
    if credentials is None:
        return None

    try:
        return await get_current_user(session, credentials.credentials)
    except HTTPException:
        return None


async def require_user(user: dict = Depends(get_current_user)) -> dict:
    """Require any authenticated user."""
    return user


def make_require_event_organizer():
    """Require the event creator or an event participant with the admin role."""

    async def _dep(
        event_id: int,
        user: dict = Depends(get_current_user),
        session: AsyncSession = Depends(get_db_session),
    ) -> dict:
        try:
            await event_service.require_event_organizer(session, event_id, user["id"])
        except ServiceError as e:
            raise HTTPException(status_code=e.status_code, detail=str(e))
        return user

    return _dep


def make_require_event_organizer_from_match():
    """Require event organizer, getting event_id from match_id."""

    async def _dep(
        match_id: int,
        user: dict = Depends(get_current_user),
        session: AsyncSession = Depends(get_db_session),
    ) -> dict:
        match = await session.get(Match, match_id)
        if match is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
        try:
            await event_service.require_event_organizer(session, match.event_id, user["id"])
        except ServiceError as e:
            raise HTTPException(status_code=e.status_code, detail=str(e))
        return user

    return _dep
