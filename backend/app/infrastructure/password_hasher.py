"""Password Hasher — passlib CryptContext configured for bcrypt."""

from passlib.context import CryptContext


class BcryptPasswordHasher:
    """PasswordHasher implementation. rounds is the bcrypt cost factor."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError):
            # Malformed stored hash counts as a mismatch
            return False
