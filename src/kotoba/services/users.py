"""Account endpoints for the logged-in user."""

from typing import Any

import structlog

from kotoba.api import ApiClient
from kotoba.envelope import Envelope
from kotoba.schemas import ChangePasswordRequest, UpdateProfileRequest, UserInfo

logger = structlog.get_logger(__name__)

BASE_PATH = "/api/users/me"


class UserService:
    """Profile, password and account deletion for the current user."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def profile(self) -> UserInfo:
        envelope = await self.client.fetch_envelope("GET", BASE_PATH, UserInfo)
        return envelope.require_data()

    async def update_profile(self, request: UpdateProfileRequest) -> UserInfo:
        """
        Change the nickname and email.

        Raises:
            ApiError: If the server rejects the change, e.g. a taken nickname
            MissingDataError: If the server answered without the updated profile
        """
        envelope = await self.client.fetch_envelope(
            "PUT", BASE_PATH, UserInfo, json=request.to_wire()
        )
        return envelope.require_data()

    async def change_password(self, request: ChangePasswordRequest) -> Envelope[Any]:
        """
        Change the password.

        Raises:
            ApiError: If the current password is wrong or the new ones differ
        """
        return await self.client.fetch_envelope(
            "PUT", f"{BASE_PATH}/password", json=request.to_wire()
        )

    async def delete_account(self) -> Envelope[Any]:
        envelope = await self.client.fetch_envelope("DELETE", BASE_PATH)
        logger.info("account_deleted")
        return envelope
