"""Custom exception hierarchy for the Kotoba client."""

from typing import Any


class KotobaError(Exception):
    """Base exception for all Kotoba errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize exception with message and optional status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class TransportError(KotobaError):
    """The request never reached the server or no response came back."""

    def __init__(self, method: str, url: str, reason: str) -> None:
        """Initialize with the request target and the underlying failure."""
        self.method = method
        self.url = url
        self.reason = reason
        super().__init__(f"{method} {url} failed: {reason}")


class ApiError(KotobaError):
    """The server answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        result_code: str | None = None,
        body: Any = None,
    ) -> None:
        """Initialize with the HTTP status, envelope message and raw body."""
        self.result_code = result_code
        self.body = body
        super().__init__(message, status_code=status_code)


class RejectedCredentialsError(ApiError):
    """Login or signup was rejected by the server."""


class UnauthenticatedError(KotobaError):
    """There is no valid session."""

    def __init__(self, message: str = "Unauthorized", status_code: int | None = 401) -> None:
        """Initialize with message and the status that signalled it."""
        super().__init__(message, status_code=status_code)


class RefreshFailedError(UnauthenticatedError):
    """The session refresh call failed; the user has to log in again."""


class RefreshTimeoutError(RefreshFailedError):
    """The session refresh call did not complete in time."""

    def __init__(self, timeout: float) -> None:
        """Initialize with the timeout that elapsed."""
        self.timeout = timeout
        super().__init__(f"Session refresh timed out after {timeout:g}s", status_code=None)


class PendingQueueFullError(KotobaError):
    """Too many requests are already waiting for the session refresh."""

    def __init__(self, max_pending: int) -> None:
        """Initialize with the queue bound that was hit."""
        self.max_pending = max_pending
        super().__init__(f"Refresh queue is full ({max_pending} pending requests)")


class MissingDataError(KotobaError):
    """An envelope arrived without the data the caller needs."""

    def __init__(self, message: str = "No data available") -> None:
        """Initialize with message."""
        super().__init__(message)
