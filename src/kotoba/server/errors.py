"""Service errors and their envelope rendering."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

logger = structlog.get_logger(__name__)


class ServiceError(Exception):
    """An error answered to the client as an envelope.

    The HTTP status is the numeric prefix of the result code.
    """

    def __init__(self, result_code: str, msg: str) -> None:
        self.result_code = result_code
        self.msg = msg
        super().__init__(msg)

    @property
    def status_code(self) -> int:
        return int(self.result_code.split("-", 1)[0])


def envelope(result_code: str, msg: str, data: Any = None) -> dict[str, Any]:
    """Build the `{resultCode, msg, data}` body."""
    return {"resultCode": result_code, "msg": msg, "data": data}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.info(
        "service_error",
        path=request.url.path,
        result_code=exc.result_code,
        msg=exc.msg,
    )
    return JSONResponse(status_code=exc.status_code, content=envelope(exc.result_code, exc.msg))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        msg = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "")
    else:
        msg = "Invalid request"
    return JSONResponse(status_code=400, content=envelope("400", msg))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("rate_limit_exceeded", path=request.url.path, limit=str(exc.detail))
    return JSONResponse(
        status_code=429, content=envelope("429", f"Rate limit exceeded: {exc.detail}")
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_error_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)  # type: ignore[arg-type]
