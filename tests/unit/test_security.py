"""Unit tests for password hashing and access tokens."""
from datetime import timedelta

import pytest
from jose import jwt

from schoolhub.core.config import settings
from schoolhub.core.errors import AuthenticationError
from schoolhub.core.security import (
    SecurityConfig,
    create_access_token,
    create_token,
    get_password_hash,
    sanitize_filename,
    verify_password,
    verify_token,
)
from schoolhub.schemas.enums import Role

pytestmark = pytest.mark.unit


class TestPasswords:
    """Tests for bcrypt hashing."""

    def test_hash_verifies(self):
        hashed = get_password_hash("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_unparseable_hash_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestTokens:
    """Tests for JWT access tokens."""

    def test_access_token_round_trip(self):
        payload = verify_token(create_access_token(42, Role.TEACHER))
        assert payload["sub"] == "42"
        assert payload["role"] == "teacher"
        assert payload["type"] == SecurityConfig.ACCESS_TOKEN_TYPE

    def test_expired_token_is_rejected(self):
        token = create_token({"sub": "1", "role": "admin"}, "access", expires_delta=timedelta(seconds=-5))
        with pytest.raises(AuthenticationError) as exc_info:
            verify_token(token)
        assert exc_info.value.status_code == 401

    def test_wrong_token_type_is_rejected(self):
        token = create_token({"sub": "1", "role": "admin"}, "refresh")
        with pytest.raises(AuthenticationError):
            verify_token(token)

    def test_token_signed_with_another_key_is_rejected(self):
        forged = jwt.encode(
            {"sub": "1", "role": "super", "type": "access", "iss": settings.TOKEN_ISSUER},
            "not-the-server-key",
            algorithm=settings.ALGORITHM
        )
        with pytest.raises(AuthenticationError):
            verify_token(forged)


def test_sanitize_filename_strips_path_separators():
    assert sanitize_filename("../../etc/passwd") == ".._.._etc_passwd"
    assert "/" not in sanitize_filename("a/b c.png")
