"""Session probe used by route guards."""

from kotoba.api import ApiClient
from kotoba.exceptions import UnauthenticatedError
from kotoba.http import ApiRequest
from kotoba.result import Failure, Result, Success
from kotoba.schemas import UserInfo


class SessionProbe:
    """Answers "is there a valid session right now"."""

    def __init__(self, client: ApiClient, path: str = "/api/auth/me") -> None:
        # A probe that could trigger a refresh would loop on its own 401.
        if not client.guard.is_session_probe(ApiRequest("GET", path)):
            msg = f"{path} is not exempt from session refresh in the client's auth guard"
            raise ValueError(msg)
        self.client = client
        self.path = path

    async def check(self) -> Result[UserInfo, UnauthenticatedError]:
        """
        Fetch the current identity.

        Returns:
            Success with the user's identity, or Failure when the server
            answers 401/403

        Raises:
            TransportError: If the server could not be reached
            ApiError: For other non-2xx responses
            MissingDataError: If a 2xx answer carries no identity
        """
        try:
            envelope = await self.client.fetch_envelope("GET", self.path, UserInfo)
        except UnauthenticatedError as e:
            return Failure(e)
        return Success(envelope.require_data())

    async def is_authenticated(self) -> bool:
        result = await self.check()
        return result.is_success
