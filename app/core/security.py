"""Security related functions."""

from datetime import timedelta
from uuid import UUID

import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from app.core.config import settings
from models.base import utcnow


class TokenAuthenticator:
    """
    Verifies bearer JSON Web Tokens issued for API callers.

    Tokens are signed with the shared ``secret_key`` using ``algorithm``
    (HS256 by default). The ``sub`` claim carries the user id.

    :ivar secret_key: The secret key used to verify JWT tokens.
    :type secret_key: str
    :ivar algorithm: The signing algorithm accepted for tokens.
    :type algorithm: str
    """

    def __init__(self):
        self.secret_key = settings.secret_key
        self.algorithm = settings.algorithm

    def verify_token(self, token: str) -> dict:
        """
        Verifies a given JSON Web Token (JWT) and returns its payload. Expired,
        malformed or wrongly signed tokens raise an HTTPException with status 401.

        :param token: The JWT token to be verified.
        :return: A dictionary containing the decoded payload of the token if validation succeeds.
        """
        try:
            return jwt.decode(
                token,
                key=self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"], "verify_aud": False},
            )
        except InvalidTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
                headers={"WWW-Authenticate": "Bearer"},
            )


def create_access_token(user_id: UUID, expires_minutes: int | None = None) -> str:
    """Mint a token for ``user_id``. Used by scripts and tests, not by an endpoint."""
    expires = utcnow() + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    payload = {"sub": str(user_id), "exp": expires, "iat": utcnow()}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)
