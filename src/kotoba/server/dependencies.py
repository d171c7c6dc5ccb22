"""FastAPI dependencies for the auth routers."""

from typing import Annotated

from fastapi import Cookie, Depends, Request

from kotoba.config import Settings
from kotoba.server.service import AuthenticationService
from kotoba.server.users import User


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthenticationService:
    return request.app.state.auth_service


AppSettings = Annotated[Settings, Depends(get_app_settings)]
AuthService = Annotated[AuthenticationService, Depends(get_auth_service)]


async def get_current_user(
    service: AuthService,
    access_token: Annotated[str | None, Cookie(alias="accessToken")] = None,
) -> User:
    """
    Get the current authenticated user from the access token cookie.

    Raises:
        ServiceError: "401" if the cookie is missing or invalid
    """
    return service.get_current_user(access_token)


CurrentUser = Annotated[User, Depends(get_current_user)]
