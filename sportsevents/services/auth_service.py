"""
Authentication helpers: password hashing, session tokens, username rules.
"""

import os
import secrets
from datetime import timedelta
from typing import Optional

import bcrypt

from sportsevents.utils.constants import DEFAULT_SESSION_EXPIRATION_HOURS, MIN_PASSWORD_LENGTH
from sportsevents.utils.datetime_utils import utcnow

SESSION_EXPIRATION_HOURS = int(
    os.getenv("SESSION_EXPIRATION_HOURS", str(DEFAULT_SESSION_EXPIRATION_HOURS))
)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (salted, so equal passwords hash differently)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


def generate_session_token() -> str:
    """Generate an opaque bearer token for a login session."""
    return secrets.token_urlsafe(32)


def session_expiry(hours: Optional[int] = None) -> str:
    """ISO timestamp at which a session created now expires."""
    return (utcnow() + timedelta(hours=hours or SESSION_EXPIRATION_HOURS)).isoformat()


def normalize_username(username: str) -> str:
    """
    Normalize a username for storage.

    Surrounding whitespace is dropped; case is preserved for display and
    ignored for lookups.

    Raises:
        ValueError: If the username is empty or contains whitespace
    """
    if not username or not username.strip():
        raise ValueError("Username is required")
    username = username.strip()
    if any(char.isspace() for char in username):
        raise ValueError("Username cannot contain spaces")
    return username


def validate_password(password: str) -> None:
    """
    Enforce the password policy.

    Raises:
        ValueError: If the password is too short
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
