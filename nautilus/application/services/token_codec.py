"""Signed identity tokens."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from nautilus.domain.users.entities import IdentityClaims, Role
from nautilus.domain.users.repositories import TokenCodec
from nautilus.shared.config import AuthConfig


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenCodec(TokenCodec):
    """HS256 JWT carrying ``user_id``, ``username``, ``role`` and ``exp``.

    A random ``jti`` makes every signed token distinct, even for the same
    user within the same second.

    Every verification failure collapses to ``None``.
    """

    def __init__(self, config: AuthConfig, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._secret = config.jwt_secret
        self._algorithm = config.jwt_algorithm
        self._ttl = timedelta(seconds=config.token_ttl_seconds)
        self._clock = clock

    def sign(self, *, user_id: int, username: str, role: Role) -> str:
        issued_at = self._clock()
        payload = {
            "user_id": user_id,
            "username": username,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> IdentityClaims | None:
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "user_id", "username", "role"]},
            )
        except jwt.PyJWTError:
            return None

        user_id = payload.get("user_id")
        username = payload.get("username")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            return None
        if not isinstance(username, str) or not username:
            return None
        try:
            role = Role(payload.get("role"))
        except ValueError:
            return None

        return IdentityClaims(
            user_id=user_id,
            username=username,
            role=role,
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
