"""
Unit tests for token verification.
"""

import uuid
from datetime import timedelta

import jwt
import pytest
from fastapi import HTTPException

from app.core.config import settings
from app.core.security import TokenAuthenticator, create_access_token
from models.base import utcnow


class TestTokenAuthenticator:
    """Test cases for TokenAuthenticator.verify_token."""

    def test_round_trip(self):
        user_id = uuid.uuid4()

        payload = TokenAuthenticator().verify_token(create_access_token(user_id))

        assert payload["sub"] == str(user_id)

    def test_expired_token(self):
        token = create_access_token(uuid.uuid4(), expires_minutes=-5)

        with pytest.raises(HTTPException) as exc_info:
            TokenAuthenticator().verify_token(token)

        assert exc_info.value.status_code == 401

    def test_wrong_signature(self):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "exp": utcnow() + timedelta(minutes=5)},
            "some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(HTTPException) as exc_info:
            TokenAuthenticator().verify_token(token)

        assert exc_info.value.status_code == 401

    def test_missing_subject(self):
        token = jwt.encode(
            {"exp": utcnow() + timedelta(minutes=5)}, settings.secret_key, algorithm="HS256"
        )

        with pytest.raises(HTTPException):
            TokenAuthenticator().verify_token(token)

    def test_garbage_token(self):
        with pytest.raises(HTTPException):
            TokenAuthenticator().verify_token("not-a-jwt")
