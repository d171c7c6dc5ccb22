"""Reference auth server implementing the session cookie contract."""

from fastapi import FastAPI

from kotoba.config import Settings, configure_logging, get_settings
from kotoba.server.auth import create_auth_router, create_limiter, users_router
from kotoba.server.errors import register_exception_handlers
from kotoba.server.passwords import PasswordService
from kotoba.server.service import AuthenticationService
from kotoba.server.tokens import TokenService
from kotoba.server.users import UserStore


def create_app(settings: Settings | None = None, users: UserStore | None = None) -> FastAPI:
    """Build the FastAPI app with an in-memory user store."""
    settings = settings or get_settings()
    configure_logging(settings.ENVIRONMENT)

    app = FastAPI(title="Kotoba auth API", version="0.1.0")
    app.state.settings = settings
    limiter = create_limiter()
    app.state.limiter = limiter
    app.state.auth_service = AuthenticationService(
        users=users if users is not None else UserStore(),
        tokens=TokenService(settings),
        passwords=PasswordService(settings.PASSWORD_PEPPER),
    )

    register_exception_handlers(app)
    app.include_router(create_auth_router(settings, limiter))
    app.include_router(users_router)
    return app
