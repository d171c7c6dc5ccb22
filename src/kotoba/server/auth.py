"""Auth routes: the session cookie contract."""

from typing import Annotated, Any

from fastapi import APIRouter, Cookie, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from kotoba.config import Settings
from kotoba.schemas import LoginRequest, SignupRequest
from kotoba.server.dependencies import AppSettings, AuthService, CurrentUser
from kotoba.server.errors import envelope
from kotoba.server.tokens import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE

users_router = APIRouter(prefix="/api/users", tags=["users"])


def set_token_cookie(
    response: Response, settings: Settings, key: str, value: str, max_age: int
) -> None:
    """Set a session token as an httpOnly cookie."""
    response.set_cookie(
        key=key,
        value=value,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
        domain=settings.COOKIE_DOMAIN,
        max_age=max_age,
    )


def clear_token_cookies(response: Response, settings: Settings) -> None:
    """Clear both session cookies."""
    for key in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            key=key,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax",
            path="/",
            domain=settings.COOKIE_DOMAIN,
        )


async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    service: AuthService,
    settings: AppSettings,
) -> dict[str, Any]:
    _, token_pair = service.authenticate_user(body.username, body.password)
    set_token_cookie(
        response,
        settings,
        ACCESS_TOKEN_COOKIE,
        token_pair.access_token,
        service.tokens.access_token_max_age,
    )
    set_token_cookie(
        response,
        settings,
        REFRESH_TOKEN_COOKIE,
        token_pair.refresh_token,
        service.tokens.refresh_token_max_age,
    )
    return envelope("200", "Login successful")


async def signup(body: SignupRequest, service: AuthService) -> dict[str, Any]:
    """Register a new account. Does not log the user in."""
    service.register_user(body)
    return envelope("201", "Registration completed")


async def logout(
    response: Response,
    service: AuthService,
    settings: AppSettings,
    refresh_token: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> dict[str, Any]:
    """Forget the stored refresh token and clear both cookies."""
    service.logout(refresh_token)
    clear_token_cookies(response, settings)
    return envelope("200", "Logout successful")


async def refresh(
    request: Request,
    response: Response,
    service: AuthService,
    settings: AppSettings,
    refresh_token: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> dict[str, Any]:
    """Issue a new access cookie from the refresh cookie."""
    access_token = service.refresh_access_token(refresh_token)
    set_token_cookie(
        response,
        settings,
        ACCESS_TOKEN_COOKIE,
        access_token,
        service.tokens.access_token_max_age,
    )
    return envelope("200", "Token refreshed")


async def me(current_user: CurrentUser) -> dict[str, Any]:
    return envelope(
        "200",
        "User information retrieved",
        current_user.to_info().model_dump(mode="json", by_alias=True),
    )


@users_router.get("/me")
async def users_me(current_user: CurrentUser) -> dict[str, Any]:
    """Same identity as `/api/auth/me`, at the path later revisions use."""
    return await me(current_user)


def create_limiter() -> Limiter:
    """Create a rate limiter keyed by client address."""
    return Limiter(key_func=get_remote_address)


def create_auth_router(settings: Settings, limiter: Limiter) -> APIRouter:
    """Build the `/api/auth` router with `settings`' rate limits applied."""
    router = APIRouter(prefix="/api/auth", tags=["auth"])
    router.add_api_route(
        "/login", limiter.limit(settings.LOGIN_RATE_LIMIT)(login), methods=["POST"]
    )
    router.add_api_route("/signup", signup, methods=["POST"])
    router.add_api_route("/logout", logout, methods=["POST"])
    router.add_api_route(
        "/refresh", limiter.limit(settings.REFRESH_RATE_LIMIT)(refresh), methods=["POST"]
    )
    router.add_api_route("/me", me, methods=["GET"])
    return router
