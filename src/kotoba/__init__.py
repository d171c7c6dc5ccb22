"""Async client for the Kotoba language-learning API."""

from kotoba.api import ApiClient
from kotoba.envelope import Envelope
from kotoba.exceptions import (
    ApiError,
    KotobaError,
    MissingDataError,
    PendingQueueFullError,
    RefreshFailedError,
    RefreshTimeoutError,
    RejectedCredentialsError,
    TransportError,
    UnauthenticatedError,
)
from kotoba.guard import AuthGuard, GuardDecision
from kotoba.http import ApiRequest, ApiResponse, HttpClient
from kotoba.refresh import RefreshCoordinator, RefreshState
from kotoba.result import Failure, Result, Success
from kotoba.session import SessionProbe

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiRequest",
    "ApiResponse",
    "AuthGuard",
    "Envelope",
    "Failure",
    "GuardDecision",
    "HttpClient",
    "KotobaError",
    "MissingDataError",
    "PendingQueueFullError",
    "RefreshCoordinator",
    "RefreshFailedError",
    "RefreshState",
    "RefreshTimeoutError",
    "RejectedCredentialsError",
    "Result",
    "SessionProbe",
    "Success",
    "TransportError",
    "UnauthenticatedError",
]
