"""
User service layer for accounts and login sessions.
"""

from typing import Optional, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sportsevents.database.models import User, LoginSession
from sportsevents.database.repository import Repository
from sportsevents.services.errors import Conflict
from sportsevents.utils.datetime_utils import utcnow, to_iso
import logging

logger = logging.getLogger(__name__)


async def create_user(
    session: AsyncSession, username: str, name: str, password_hash: str
) -> int:
    """
    Create a new user account.

    Args:
        session: Database session
        username: Unique username (uniqueness is case-insensitive)
        name: Display name
        password_hash: Hashed password

    Returns:
        User ID of the created user

    Raises:
        Conflict: If the username is already taken
    """
    if await get_user_by_username(session, username):
        raise Conflict(f"Username {username} is already taken")

    new_user = await Repository(session, User).create(
        username=username, name=name, password_hash=password_hash
    )
    user_id = new_user.id
    await session.commit()

    logger.info(f"Registered user {user_id} ({username})")
    return user_id


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[Dict]:
    """
    Get user by username, ignoring case.

    Args:
        session: Database session
        username: Username to look up

    Returns:
        User dictionary or None if not found
    """
    username = username.strip().lower() if username else None
    if not username:
        return None

    result = await session.execute(
        select(User).where(func.lower(User.username) == username).limit(1)
    )
    user = result.scalar_one_or_none()
    return _user_to_dict(user) if user else None


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[Dict]:
    """
    Get user by ID.

    Args:
        session: Database session
        user_id: User ID

    Returns:
        User dictionary or None if not found
    """
    user = await Repository(session, User).get(user_id)
    return _user_to_dict(user) if user else None


async def get_all_users(session: AsyncSession) -> List[Dict]:
    """Get every registered user in registration order."""
    users = await Repository(session, User).find()
    return [_user_to_dict(user) for user in users]


def _user_to_dict(user: User) -> Dict:
    """
    Convert a User ORM instance to a dictionary.

    Args:
        user: User ORM instance

    Returns:
        User dictionary
    """
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "role": user.role,
        "password_hash": user.password_hash,
        "created_at": to_iso(user.created_at),
    }


def public_user(user: Dict) -> Dict:
    """Strip credentials from a user dictionary."""
    return {key: value for key, value in user.items() if key != "password_hash"}


# Login session functions


async def create_login_session(
    session: AsyncSession, user_id: int, token: str, expires_at: str
) -> Dict:
    """
    Create a login session for a user.

    A user may hold several sessions at once (one per device); each is
    destroyed independently at logout.

    Args:
        session: Database session
        user_id: User ID
        token: Opaque bearer token
        expires_at: ISO expiry timestamp

    Returns:
        Login session dictionary
    """
    login_session = await Repository(session, LoginSession).create(
        user_id=user_id, token=token, expires_at=expires_at
    )
    await session.commit()
    return _login_session_to_dict(login_session)


async def get_login_session(session: AsyncSession, token: str) -> Optional[Dict]:
    """
    Get a live (unexpired) login session by token.

    Args:
        session: Database session
        token: Bearer token

    Returns:
        Login session dictionary, or None if unknown or expired
    """
    if not token:
        return None
    result = await session.execute(
        select(LoginSession).where(
            LoginSession.token == token,
            LoginSession.expires_at > utcnow().isoformat(),
        )
    )
    login_session = result.scalar_one_or_none()
    return _login_session_to_dict(login_session) if login_session else None


async def delete_login_session(session: AsyncSession, token: str) -> bool:
    """
    Delete a login session (logout).

    Returns:
        True if a session was deleted, False otherwise
    """
    result = await session.execute(delete(LoginSession).where(LoginSession.token == token))
    await session.commit()
    return result.rowcount > 0


async def delete_expired_login_sessions(session: AsyncSession) -> int:
    """
    Purge expired login sessions.

    Returns:
        Number of sessions deleted
    """
    result = await session.execute(
        delete(LoginSession).where(LoginSession.expires_at <= utcnow().isoformat())
    )
    await session.commit()
    if result.rowcount:
        logger.info(f"Purged {result.rowcount} expired login session(s)")
    return result.rowcount


def _login_session_to_dict(login_session: LoginSession) -> Dict:
    return {
        "id": login_session.id,
        "user_id": login_session.user_id,
        "token": login_session.token,
        "expires_at": login_session.expires_at,
        "created_at": to_iso(login_session.created_at),
    }
