"""Refresh coordinator: at most one session refresh in flight."""

import asyncio
import inspect
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from kotoba.exceptions import (
    KotobaError,
    PendingQueueFullError,
    RefreshFailedError,
    RefreshTimeoutError,
)
from kotoba.http import ApiRequest

logger = structlog.get_logger(__name__)

RefreshCall = Callable[[], Awaitable[None]]
LoginRedirect = Callable[[str], Awaitable[None] | None]


class RefreshState(Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


@dataclass
class PendingRequest:
    """A caller waiting for the refresh already running.

    `request` is None when the caller asked for a refresh directly.
    """

    request: ApiRequest | None
    waiter: asyncio.Future[None]


def log_login_redirect(login_path: str) -> None:
    """Default redirect hook: there is no navigation to drive, so just log it."""
    logger.warning("login_redirect_required", login_path=login_path)


class RefreshCoordinator:
    """Serialize session refreshes.

    The first caller flips the state to REFRESHING and runs the refresh call;
    callers arriving while it runs are queued and released together when it
    settles. The state check and flip happen with no await in between, so a
    burst of 401s on the event loop produces exactly one refresh call.

    On failure every queued caller and the initiating caller receive the same
    `RefreshFailedError`, and `on_failure` is called once with `login_path`.
    """

    def __init__(
        self,
        refresh: RefreshCall,
        *,
        on_failure: LoginRedirect | None = None,
        login_path: str = "/login",
        timeout: float | None = 10.0,
        max_pending: int | None = 100,
    ) -> None:
        self._refresh = refresh
        self._on_failure = on_failure or log_login_redirect
        self.login_path = login_path
        self.timeout = timeout
        self.max_pending = max_pending
        self._state = RefreshState.IDLE
        self._pending: deque[PendingRequest] = deque()

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def is_refreshing(self) -> bool:
        return self._state is RefreshState.REFRESHING

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def refresh(self, request: ApiRequest | None = None) -> None:
        """Refresh the session, or join the refresh already running.

        `request` is the request that hit the 401; it is None for a refresh
        asked for directly. Returns once the session has been refreshed; the
        caller then retries its own request.

        Raises:
            RefreshFailedError: If the refresh call failed or timed out
            PendingQueueFullError: If too many requests are already waiting
        """
        if self._state is RefreshState.REFRESHING:
            await self._wait(request)
            return

        self._state = RefreshState.REFRESHING
        logger.info(
            "refresh_started",
            method=request.method if request else None,
            path=request.path if request else None,
        )
        try:
            await self._call_refresh()
        except RefreshFailedError as error:
            logger.warning(
                "refresh_failed",
                error=error.message,
                status_code=error.status_code,
                rejected=len(self._pending),
            )
            self._settle(error)
            await self._redirect()
            raise
        except BaseException:
            # Cancelled or crashed: the queue must still be settled.
            self._settle(RefreshFailedError("Session refresh was interrupted", status_code=None))
            raise

        logger.info("refresh_succeeded", released=len(self._pending))
        self._settle(None)

    async def _wait(self, request: ApiRequest | None) -> None:
        if self.max_pending is not None and len(self._pending) >= self.max_pending:
            raise PendingQueueFullError(self.max_pending)

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._pending.append(PendingRequest(request=request, waiter=waiter))
        logger.debug(
            "request_queued_for_refresh",
            method=request.method if request else None,
            path=request.path if request else None,
            pending=len(self._pending),
        )
        await waiter

    async def _call_refresh(self) -> None:
        try:
            async with asyncio.timeout(self.timeout):
                await self._refresh()
        except TimeoutError as e:
            raise RefreshTimeoutError(self.timeout or 0) from e
        except RefreshFailedError:
            raise
        except KotobaError as e:
            raise RefreshFailedError(e.message, status_code=e.status_code) from e

    def _settle(self, error: RefreshFailedError | None) -> None:
        self._state = RefreshState.IDLE
        while self._pending:
            pending = self._pending.popleft()
            # Cancelled waiters have nobody left to notify.
            if pending.waiter.done():
                continue
            if error is None:
                pending.waiter.set_result(None)
            else:
                pending.waiter.set_exception(error)

    async def _redirect(self) -> None:
        # The refresh error is what callers see, whatever the hook does.
        try:
            outcome = self._on_failure(self.login_path)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("login_redirect_failed", login_path=self.login_path)
