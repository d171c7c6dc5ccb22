"""Password hashing and verification service."""

from pwdlib import PasswordHash

password_hash = PasswordHash.recommended()


class PasswordService:
    """Peppered password hashing."""

    def __init__(self, pepper: str = "") -> None:
        self.pepper = pepper
        self._dummy_hash: str | None = None

    def hash_password(self, plain_password: str) -> str:
        """Hash a plain password for storage with pepper."""
        return password_hash.hash(plain_password + self.pepper)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against a hashed password."""
        return password_hash.verify(plain_password + self.pepper, hashed_password)

    def verify_dummy(self, plain_password: str) -> None:
        """Spend the same time as a real verification, for unknown users."""
        if self._dummy_hash is None:
            self._dummy_hash = password_hash.hash("kotoba-dummy-password")
        password_hash.verify(plain_password + self.pepper, self._dummy_hash)
