"""Application service for authentication operations."""

from dataclasses import dataclass

import structlog

from kotoba.schemas import SignupRequest
from kotoba.server.errors import ServiceError
from kotoba.server.passwords import PasswordService
from kotoba.server.tokens import TokenService
from kotoba.server.users import User, UserStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthenticationService:
    """Application service for authentication operations."""

    def __init__(
        self, users: UserStore, tokens: TokenService, passwords: PasswordService
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.passwords = passwords

    def authenticate_user(self, username: str, password: str) -> tuple[User, TokenPair]:
        """
        Authenticate a user with username and password.

        Args:
            username: The account's username
            password: User's plain text password

        Returns:
            Tuple of (authenticated user, token pair)

        Raises:
            ServiceError: "401" if credentials are invalid
        """
        user = self.users.find_by_username(username)

        if not user:
            # Keep timing consistent with a real password check
            self.passwords.verify_dummy(password)
            raise ServiceError("401", "Incorrect username or password.")

        if not self.passwords.verify_password(password, user.hashed_password):
            raise ServiceError("401", "Incorrect username or password.")

        token_pair = TokenPair(
            access_token=self.tokens.create_access_token(username),
            refresh_token=self.tokens.create_refresh_token(username),
        )
        user.update_refresh_token(token_pair.refresh_token)

        logger.info("user_authenticated", user_id=user.id, username=username)

        return user, token_pair

    def register_user(self, request: SignupRequest) -> User:
        """
        Register a new account.

        Raises:
            ServiceError: "400" if the passwords differ or any of username,
                nickname or email is taken
        """
        if not request.passwords_match():
            raise ServiceError("400", "Passwords do not match.")
        if self.users.exists_by_username(request.username):
            raise ServiceError("400", "Username already exists.")
        if self.users.exists_by_nickname(request.nickname):
            raise ServiceError("400", "Nickname already exists.")
        if self.users.exists_by_email(request.email):
            raise ServiceError("400", "Email already exists.")

        return self.users.add(
            username=request.username,
            email=request.email,
            nickname=request.nickname,
            hashed_password=self.passwords.hash_password(request.password),
        )

    def refresh_access_token(self, refresh_token: str | None) -> str:
        """
        Issue a new access token from the stored refresh token.

        Raises:
            ServiceError: "401" if the token is missing, invalid, or not the
                one currently stored for the user
        """
        username = self.tokens.verify_refresh_token(refresh_token) if refresh_token else None
        if username is None:
            raise ServiceError("401", "Invalid refresh token.")

        user = self.users.find_by_username(username)
        if user is None or user.refresh_token != refresh_token:
            raise ServiceError("401", "Refresh token does not match.")

        logger.info("access_token_refreshed", user_id=user.id)
        return self.tokens.create_access_token(username)

    def logout(self, refresh_token: str | None) -> None:
        """Forget the user's refresh token if the presented one is valid."""
        username = self.tokens.verify_refresh_token(refresh_token) if refresh_token else None
        if username is None:
            return
        user = self.users.find_by_username(username)
        if user is not None:
            user.destroy_refresh_token()
            logger.info("user_logged_out", user_id=user.id)

    def get_current_user(self, access_token: str | None) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            ServiceError: "401" if the token is missing or invalid
        """
        username = self.tokens.verify_access_token(access_token) if access_token else None
        user = self.users.find_by_username(username) if username else None
        if user is None:
            raise ServiceError("401", "Authentication required.")
        return user
