"""Password hashing (Argon2id) and JWT token pairs.

Access and refresh tokens are signed with separate keys taken from
:class:`~filmlog.config.Settings`; nothing here reads global state.
"""

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from functools import lru_cache
from typing import Any
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError
from pydantic import BaseModel

from filmlog.config import Settings


class TokenType(StrEnum):
    """Value of the ``type`` claim carried by access tokens."""

    ACCESS = "access"


# Argon2id, 64 MiB memory, 3 passes
_password_hasher = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)


class TokenPair(BaseModel):
    """Access and refresh tokens issued together."""

    access_token: str
    refresh_token: str


def hash_password(password: str) -> str:
    """Return an encoded Argon2id hash (parameters and salt included)."""
    return _password_hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        _password_hasher.verify(hashed_password, password)
        return True
    except (VerificationError, InvalidHash):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _password_hasher.hash("filmlog-dummy-password")


def burn_password_check(password: str) -> None:
    """Run a full hash verification whose result is ignored.

    Used when the account does not exist, so the unknown-email path costs
    the same as a wrong password.
    """
    verify_password(password, _dummy_hash())


class TokenService:
    """Issues and verifies signed JWT token pairs.

    Access tokens and refresh tokens are signed with different secrets, so
    one can never be accepted in place of the other.
    """

    def __init__(self, settings: Settings) -> None:
        self._access_secret = settings.jwt_secret
        self._refresh_secret = settings.jwt_refresh_secret
        self._algorithm = settings.jwt_algorithm
        self.access_lifetime = timedelta(days=settings.access_token_expire_days)
        self.refresh_lifetime = timedelta(days=settings.refresh_token_expire_days)

    def create_access_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Sign a short-lived access token for ``user_id``.

        Claims: ``sub``, ``iat``, ``exp`` and ``type=access``. Pass
        ``expires_delta`` to override the configured lifetime.
        """
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + (expires_delta or self.access_lifetime),
            "type": TokenType.ACCESS.value,
        }
        return jwt.encode(payload, self._access_secret, algorithm=self._algorithm)

    def create_refresh_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Sign a long-lived refresh token carrying only ``sub``, ``iat`` and ``exp``."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + (expires_delta or self.refresh_lifetime),
        }
        return jwt.encode(payload, self._refresh_secret, algorithm=self._algorithm)

    def issue_token_pair(self, user_id: UUID) -> TokenPair:
        """Create a fresh access/refresh token pair for a user."""
        return TokenPair(
            access_token=self.create_access_token(user_id),
            refresh_token=self.create_refresh_token(user_id),
        )

    def verify_access_token(self, token: str) -> UUID | None:
        """Return the user id from a valid access token, else ``None``."""
        payload = self._decode(token, self._access_secret)
        if payload is None or payload.get("type") != TokenType.ACCESS:
            return None
        return _subject(payload)

    def verify_refresh_token(self, token: str) -> UUID | None:
        """Return the user id from a valid refresh token, else ``None``."""
        payload = self._decode(token, self._refresh_secret)
        return None if payload is None else _subject(payload)

    def _decode(self, token: str, secret: str) -> dict[str, Any] | None:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.InvalidTokenError:
            # ExpiredSignatureError is a subclass
            return None


def _subject(payload: dict[str, Any]) -> UUID | None:
    try:
        return UUID(str(payload["sub"]))
    except (KeyError, ValueError):
        return None
