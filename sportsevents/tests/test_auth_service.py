"""
Unit tests for authentication service.
Tests password hashing, session tokens, and username/password rules.
"""
import pytest
from datetime import datetime
from sportsevents.services import auth_service
from sportsevents.utils.datetime_utils import utcnow


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password(self):
        """Test password hashing produces different hashes for same password."""
        password = "test_password_123"
        hash1 = auth_service.hash_password(password)
        hash2 = auth_service.hash_password(password)

        # Hashes should be different (due to salt)
        assert hash1 != hash2
        assert auth_service.verify_password(password, hash1)
        assert auth_service.verify_password(password, hash2)

    def test_verify_password_incorrect(self):
        password_hash = auth_service.hash_password("test_password_123")

        assert auth_service.verify_password("wrong_password", password_hash) is False

    def test_verify_password_empty(self):
        password_hash = auth_service.hash_password("test_password_123")

        assert auth_service.verify_password("", password_hash) is False
        assert auth_service.verify_password("test_password_123", "") is False

    def test_verify_password_malformed_hash(self):
        """A corrupt stored hash fails verification instead of raising."""
        assert auth_service.verify_password("test_password_123", "not-a-bcrypt-hash") is False


class TestSessionTokens:
    """Tests for login session tokens and expiry."""

    def test_tokens_are_unique(self):
        tokens = {auth_service.generate_session_token() for _ in range(50)}
        assert len(tokens) == 50

    def test_token_is_url_safe(self):
        token = auth_service.generate_session_token()
        assert len(token) >= 32
        assert all(c.isalnum() or c in "-_" for c in token)

    def test_session_expiry_in_future(self):
        expires_at = datetime.fromisoformat(auth_service.session_expiry(hours=2))
        delta = expires_at - utcnow()
        assert 1.9 * 3600 < delta.total_seconds() <= 2 * 3600

    def test_session_expiry_default(self):
        expires_at = datetime.fromisoformat(auth_service.session_expiry())
        delta = expires_at - utcnow()
        assert delta.total_seconds() > (auth_service.SESSION_EXPIRATION_HOURS - 1) * 3600


class TestUsernameRules:
    """Tests for username normalization."""

    def test_strips_whitespace(self):
        assert auth_service.normalize_username("  Alice ") == "Alice"

    def test_empty_username(self):
        with pytest.raises(ValueError, match="Username is required"):
            auth_service.normalize_username("   ")

    def test_username_with_space(self):
        with pytest.raises(ValueError, match="cannot contain spaces"):
            auth_service.normalize_username("alice smith")


class TestPasswordPolicy:
    def test_short_password_rejected(self):
        with pytest.raises(ValueError, match="at least 8 characters"):
            auth_service.validate_password("short")

    def test_long_enough_password(self):
        auth_service.validate_password("long-enough")
