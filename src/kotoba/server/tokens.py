"""Token creation and verification service."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt
from jwt import InvalidTokenError

from kotoba.config import Settings

ALGORITHM = "HS256"
ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


class TokenService:
    """Create and verify the HS256 JWTs carried in the session cookies."""

    def __init__(self, settings: Settings) -> None:
        self.secret_key = settings.SECRET_KEY
        self.refresh_secret_key = settings.refresh_secret_key
        self.access_token_lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_token_lifetime = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    @property
    def access_token_max_age(self) -> int:
        return int(self.access_token_lifetime.total_seconds())

    @property
    def refresh_token_max_age(self) -> int:
        return int(self.refresh_token_lifetime.total_seconds())

    def create_access_token(self, username: str) -> str:
        """Create an access token for a user."""
        return self._encode(username, "access", self.access_token_lifetime, self.secret_key)

    def create_refresh_token(self, username: str) -> str:
        """Create a refresh token for a user."""
        return self._encode(
            username, "refresh", self.refresh_token_lifetime, self.refresh_secret_key
        )

    def verify_access_token(self, token: str) -> str | None:
        """Verify an access token and return the username if valid."""
        return self._decode(token, "access", self.secret_key)

    def verify_refresh_token(self, token: str) -> str | None:
        """Verify a refresh token and return the username if valid."""
        return self._decode(token, "refresh", self.refresh_secret_key)

    def _encode(self, username: str, token_type: str, lifetime: timedelta, key: str) -> str:
        expire = datetime.now(UTC) + lifetime
        # jti keeps tokens issued within the same second distinct
        to_encode = {
            "sub": username,
            "exp": expire,
            "type": token_type,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(to_encode, key, algorithm=ALGORITHM)

    def _decode(self, token: str, token_type: str, key: str) -> str | None:
        try:
            payload = jwt.decode(token, key, algorithms=[ALGORITHM])
        except InvalidTokenError:
            return None
        if payload.get("type") != token_type:
            return None
        username = payload.get("sub")
        return username if isinstance(username, str) and username else None
