"""In-memory user store."""

import itertools
from dataclasses import dataclass

import structlog

from kotoba.schemas import UserInfo

logger = structlog.get_logger(__name__)


@dataclass
class User:
    """A registered account and its current refresh token."""

    id: int
    username: str
    email: str
    nickname: str
    hashed_password: str
    role: str = "USER"
    refresh_token: str | None = None

    def update_refresh_token(self, refresh_token: str) -> None:
        self.refresh_token = refresh_token

    def destroy_refresh_token(self) -> None:
        self.refresh_token = None

    def to_info(self) -> UserInfo:
        return UserInfo(
            id=self.id,
            username=self.username,
            email=self.email,
            nickname=self.nickname,
            role=self.role,
        )


class UserStore:
    """Users keyed by username."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._users)

    def add(self, username: str, email: str, nickname: str, hashed_password: str) -> User:
        """Create and store a user; uniqueness is checked by the caller."""
        user = User(
            id=next(self._ids),
            username=username,
            email=email,
            nickname=nickname,
            hashed_password=hashed_password,
        )
        self._users[username] = user
        logger.info("user_created", username=username, user_id=user.id)
        return user

    def find_by_username(self, username: str) -> User | None:
        return self._users.get(username)

    def exists_by_username(self, username: str) -> bool:
        return username in self._users

    def exists_by_nickname(self, nickname: str) -> bool:
        return any(user.nickname == nickname for user in self._users.values())

    def exists_by_email(self, email: str) -> bool:
        return any(user.email == email for user in self._users.values())
