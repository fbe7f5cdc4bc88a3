"""Password hashing (passlib/argon2) and signed tokens (python-jose)."""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        result: bool = pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized hash format
        return False
    return result


class TokenSigner:
    """Issues and decodes HS256 JWTs for sessions and password resets."""

    def __init__(self, secret_key: str) -> None:
        self._secret_key = secret_key

    def create(
        self,
        claims: dict[str, Any],
        expires_delta: timedelta,
        now_utc: datetime | None = None,
    ) -> tuple[str, datetime]:
        """Return (token, expires_at)."""
        current_time = now_utc if now_utc is not None else datetime.now(UTC)
        expires_at = current_time + expires_delta
        to_encode = {**claims, "exp": expires_at, "iat": current_time}
        token: str = jwt.encode(to_encode, self._secret_key, algorithm=ALGORITHM)
        return token, expires_at

    def decode(self, token: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except JWTError:
            return None
        return cast(dict[str, Any], payload)
