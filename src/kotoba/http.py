"""HTTP client wrapper: sends requests with session cookies attached."""

from dataclasses import dataclass, field
from types import TracebackType
from typing import Any

import httpx
import structlog

from kotoba.envelope import Envelope
from kotoba.exceptions import ApiError, TransportError

logger = structlog.get_logger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json"}


@dataclass
class ApiRequest:
    """Everything needed to (re)issue a request.

    `retried` is set once the request has been through a session refresh, so it
    is never refreshed-and-retried twice.
    """

    method: str
    path: str
    params: dict[str, Any] | None = None
    json: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    retried: bool = False

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    def targets(self, path: str) -> bool:
        """Whether this request's URL contains `path`."""
        return path in self.path


@dataclass(frozen=True)
class ApiResponse:
    """Status, headers and parsed body of an HTTP response."""

    status_code: int
    headers: httpx.Headers
    body: Any

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ApiResponse":
        """Parse JSON bodies by content-type, keep everything else as text."""
        content_type = response.headers.get("content-type", "")
        body: Any = response.text
        if "json" in content_type and response.content:
            try:
                body = response.json()
            except ValueError:
                logger.warning(
                    "response_json_invalid",
                    status_code=response.status_code,
                    content_type=content_type,
                )
        return cls(status_code=response.status_code, headers=response.headers, body=body)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def message(self) -> str:
        """The envelope `msg`, or a generic reason phrase."""
        if isinstance(self.body, dict) and isinstance(self.body.get("msg"), str):
            return self.body["msg"]
        if isinstance(self.body, str) and self.body:
            return self.body
        return f"HTTP {self.status_code}"

    @property
    def result_code(self) -> str | None:
        if isinstance(self.body, dict) and self.body.get("resultCode") is not None:
            return str(self.body["resultCode"])
        return None

    def envelope(self, data_type: Any = Any) -> Envelope[Any]:
        """Validate the body as an `Envelope[data_type]`."""
        return Envelope[data_type].model_validate(self.body)  # type: ignore[valid-type]

    def to_error(self, error_class: type[ApiError] = ApiError) -> ApiError:
        """Build the exception describing this non-2xx response."""
        return error_class(
            self.status_code,
            self.message,
            result_code=self.result_code,
            body=self.body,
        )

    def raise_for_status(self) -> "ApiResponse":
        if not self.is_success:
            raise self.to_error()
        return self


class HttpClient:
    """Thin async wrapper around `httpx.AsyncClient`.

    Cookies set by the server are kept in the client's cookie jar and sent with
    every later request. Every HTTP status is returned as an `ApiResponse`; only
    transport failures raise.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            transport=transport,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        """Session cookies currently held by the client."""
        return self._client.cookies

    async def send(self, request: ApiRequest) -> ApiResponse:
        """Send `request` and return the response whatever its status.

        Raises:
            TransportError: If the server could not be reached or did not answer
        """
        try:
            response = await self._client.request(
                request.method,
                request.path,
                params=request.params,
                json=request.json,
                headers=request.headers or None,
            )
        except httpx.TransportError as e:
            logger.warning(
                "request_transport_failed", method=request.method, path=request.path, error=str(e)
            )
            raise TransportError(request.method, request.path, str(e) or type(e).__name__) from e

        logger.debug(
            "request_completed",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
        )
        return ApiResponse.from_httpx(response)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
