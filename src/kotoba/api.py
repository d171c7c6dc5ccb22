"""API client: HTTP wrapper plus the auth guard and refresh coordinator."""

from types import TracebackType
from typing import Any

import httpx
import structlog

from kotoba.config import Settings, get_settings
from kotoba.envelope import Envelope
from kotoba.exceptions import RefreshFailedError, RejectedCredentialsError, UnauthenticatedError
from kotoba.guard import AuthGuard, GuardDecision
from kotoba.http import ApiRequest, ApiResponse, HttpClient
from kotoba.refresh import LoginRedirect, RefreshCoordinator

logger = structlog.get_logger(__name__)


class ApiClient:
    """HTTP client for the Kotoba REST API.

    Every request goes through the same interceptor: a 401 on an ordinary
    endpoint refreshes the session once (shared with any other request that
    fails at the same time) and the request is re-sent. Session probe and
    login/signup failures are never refreshed.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        refresh_timeout: float | None = 10.0,
        max_pending: int | None = 100,
        login_path: str = "/login",
        on_login_required: LoginRedirect | None = None,
        guard: AuthGuard | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.http = HttpClient(base_url, timeout=timeout, transport=transport)
        self.guard = guard or AuthGuard()
        self.coordinator = RefreshCoordinator(
            self._post_refresh,
            on_failure=on_login_required,
            login_path=login_path,
            timeout=refresh_timeout,
            max_pending=max_pending,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        on_login_required: LoginRedirect | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ApiClient":
        """Build a client from application settings."""
        settings = settings or get_settings()
        return cls(
            settings.API_URL,
            timeout=settings.REQUEST_TIMEOUT,
            refresh_timeout=settings.REFRESH_TIMEOUT,
            max_pending=settings.MAX_PENDING_REQUESTS,
            login_path=settings.LOGIN_PATH,
            on_login_required=on_login_required,
            guard=AuthGuard(probe_paths=(settings.SESSION_PROBE_PATH, "/api/users/me")),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _post_refresh(self) -> None:
        """Ask the server to rotate the session cookies."""
        response = await self.http.send(ApiRequest("POST", self.guard.refresh_path))
        if not response.is_success:
            raise RefreshFailedError(response.message, status_code=response.status_code)

    async def refresh_session(self) -> None:
        """Refresh the session now, or join the refresh already running.

        Raises:
            RefreshFailedError: If the refresh call failed or timed out
        """
        await self.coordinator.refresh()

    async def send(self, request: ApiRequest) -> ApiResponse:
        """Send `request`, recovering from an expired session at most once.

        Raises:
            TransportError: If the server could not be reached
            UnauthenticatedError: If the session probe reports no session
            RefreshFailedError: If the session had to be refreshed and could not be
            RejectedCredentialsError: If login or signup was rejected
            ApiError: For any other non-2xx response
        """
        response = await self.http.send(request)
        if response.is_success:
            return response

        decision = self.guard.decide(request, response)
        if decision is GuardDecision.UNAUTHENTICATED:
            raise UnauthenticatedError(response.message, status_code=response.status_code)
        if decision is GuardDecision.REJECTED_CREDENTIALS:
            raise response.to_error(RejectedCredentialsError)
        if decision is GuardDecision.REFRESH:
            request.retried = True
            await self.coordinator.refresh(request)
            return await self.send(request)
        raise response.to_error()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Make an API request with automatic session refresh."""
        return await self.send(
            ApiRequest(method, path, params=params, json=json, headers=headers or {})
        )

    async def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("DELETE", path, **kwargs)

    async def fetch_envelope(
        self, method: str, path: str, data_type: Any = Any, **kwargs: Any
    ) -> Envelope[Any]:
        """Make a request and validate the body as `Envelope[data_type]`."""
        response = await self.request(method, path, **kwargs)
        return response.envelope(data_type)
