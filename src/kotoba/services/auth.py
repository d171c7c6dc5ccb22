"""Authentication endpoints."""

from typing import Any

import structlog

from kotoba.api import ApiClient
from kotoba.envelope import Envelope
from kotoba.exceptions import UnauthenticatedError
from kotoba.schemas import LoginRequest, SignupRequest, UserInfo

logger = structlog.get_logger(__name__)


class AuthService:
    """Login, signup, logout and session identity."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def login(self, username: str, password: str) -> Envelope[Any]:
        """Log in; the server answers with session cookies.

        Raises:
            RejectedCredentialsError: If the username or password is wrong
        """
        body = LoginRequest(username=username, password=password).to_wire()
        envelope = await self.client.fetch_envelope("POST", "/api/auth/login", json=body)
        logger.info("user_authenticated", username=username)
        return envelope

    async def signup(self, request: SignupRequest) -> Envelope[Any]:
        """Register a new account.

        Raises:
            RejectedCredentialsError: With the server's message, e.g. a taken username
        """
        return await self.client.fetch_envelope(
            "POST", "/api/auth/signup", json=request.to_wire()
        )

    async def logout(self) -> Envelope[Any]:
        return await self.client.fetch_envelope("POST", "/api/auth/logout")

    async def refresh(self) -> None:
        """Rotate the session cookies now.

        Shares the refresh the client runs for expired sessions, so it never
        overlaps one already in flight.

        Raises:
            RefreshFailedError: If the server refused the refresh cookie
        """
        await self.client.refresh_session()

    async def current_user(self) -> Envelope[UserInfo]:
        """Get the current identity.

        Never raises for a missing session: answers a `"401"` envelope without
        data instead.
        """
        try:
            return await self.client.fetch_envelope("GET", "/api/auth/me", UserInfo)
        except UnauthenticatedError:
            return Envelope[UserInfo](resultCode="401", msg="Unauthorized", data=None)
