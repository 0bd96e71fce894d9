# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Resolve a raw token into an authenticated identity."""

from __future__ import annotations

from dataclasses import dataclass

from nautilus.domain.users.entities import IdentityClaims, Role, Session
from nautilus.domain.users.repositories import SessionRepository, TokenCodec
from nautilus.shared.logging import logger


@dataclass(slots=True, frozen=True)
class AuthContext:
    """Identity handed to guarded handlers."""

    claims: IdentityClaims
    session: Session
    token: str

    @property
    def user_id(self) -> int:
        return self.claims.user_id

    @property
    def username(self) -> str:
        return self.claims.username

    @property
    def role(self) -> Role:
        return self.claims.role


class AuthenticationService:
    def __init__(self, *, codec: TokenCodec, sessions: SessionRepository) -> None:
        self._codec = codec
        self._sessions = sessions

    def authenticate(self, token: str | None) -> AuthContext | None:
        """Return the caller's identity, or ``None`` when unauthenticated.

        The token must verify and its session row must still be live; a
        deleted session revokes an otherwise valid token. Storage errors
        propagate instead of being reported as unauthenticated.
        """
        if not token:
            return None

        claims = self._codec.verify(token)
        if claims is None:
            logger.debug("auth.pipeline: token rejected by codec")
            return None

        session = self._sessions.find_live(token)
        if session is None:
            logger.debug(f"auth.pipeline: no live session for user={claims.user_id}")
            return None

        if session.user_id != claims.user_id:
            logger.warning(
                f"auth.pipeline: session owner {session.user_id} does not match "
                f"token user {claims.user_id}"
            )
            return None

        return AuthContext(claims=claims, session=session, token=token)
