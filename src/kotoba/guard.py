"""Auth guard: decides what to do with a failed response."""

from collections.abc import Iterable
from enum import Enum

from kotoba.http import ApiRequest, ApiResponse

SESSION_PROBE_PATHS = ("/api/auth/me", "/api/users/me")
CREDENTIAL_PATHS = ("/api/auth/login", "/api/auth/signup")
REFRESH_PATH = "/api/auth/refresh"


class GuardDecision(Enum):
    """Recovery action for a non-2xx response."""

    UNAUTHENTICATED = "unauthenticated"
    REJECTED_CREDENTIALS = "rejected_credentials"
    REFRESH = "refresh"
    PROPAGATE = "propagate"


class AuthGuard:
    """Classify failed responses.

    Rules, first match wins:

    1. session probe (a GET on a probe path) answered 401/403 ->
       UNAUTHENTICATED (never refreshed, the probe is what decides whether a
       session exists)
    2. login or signup failed -> REJECTED_CREDENTIALS
    3. 401 on a request not yet retried -> REFRESH
    4. anything else -> PROPAGATE

    A 401 from the refresh endpoint itself always propagates.
    """

    def __init__(
        self,
        probe_paths: Iterable[str] = SESSION_PROBE_PATHS,
        credential_paths: Iterable[str] = CREDENTIAL_PATHS,
        refresh_path: str = REFRESH_PATH,
    ) -> None:
        self.probe_paths = tuple(probe_paths)
        self.credential_paths = tuple(credential_paths)
        self.refresh_path = refresh_path

    def is_session_probe(self, request: ApiRequest) -> bool:
        # Account writes share the /api/users/me prefix and refresh normally.
        if request.method != "GET":
            return False
        return any(request.targets(path) for path in self.probe_paths)

    def is_credentials_request(self, request: ApiRequest) -> bool:
        return any(request.targets(path) for path in self.credential_paths)

    def decide(self, request: ApiRequest, response: ApiResponse) -> GuardDecision:
        """Return the action for `response`, which must not be a 2xx."""
        status = response.status_code
        if self.is_session_probe(request) and status in (401, 403):
            return GuardDecision.UNAUTHENTICATED
        if self.is_credentials_request(request):
            return GuardDecision.REJECTED_CREDENTIALS
        if status == 401 and not request.retried and not request.targets(self.refresh_path):
            return GuardDecision.REFRESH
        return GuardDecision.PROPAGATE
