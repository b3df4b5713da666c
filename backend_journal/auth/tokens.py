"""
JWT issuance and verification (HS256).

Claims: ``id`` (user id) and ``exp``. Tokens expire after ``ttl_hours``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from backend_journal.core.exceptions import AuthenticationError, ConfigurationError

ALGORITHM = "HS256"
BEARER_PREFIX = "bearer "


class TokenService:
    def __init__(self, secret: str, ttl_hours: int = 3) -> None:
        if not secret:
            raise ConfigurationError("JWT_SECRET must be set")
        self._secret = secret
        self._ttl = timedelta(hours=ttl_hours)

    def create_token(self, user_id: str) -> str:
        expires = datetime.now(timezone.utc) + self._ttl
        return jwt.encode({"id": user_id, "exp": expires}, self._secret, algorithm=ALGORITHM)

    def decode_token(self, token: str | None) -> str:
        """
        Verify a token and return the user id it was issued for.

        Accepts the raw token or an ``Authorization`` value with a Bearer prefix.
        """
        if not token or not token.strip():
            raise AuthenticationError("missing token")
        token = token.strip()
        if token.lower().startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):].strip()
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("token expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("invalid token") from e
        user_id = claims.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise AuthenticationError("invalid token")
        return user_id
