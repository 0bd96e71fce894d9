# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from nautilus.domain.users.entities import SessionProvenance, User
from nautilus.domain.users.exceptions import InvalidCredentialsError
from nautilus.domain.users.repositories import (
    PasswordHasher,
    SessionRepository,
    TokenCodec,
    UserRepository,
)
from nautilus.shared.logging import logger


@dataclass(slots=True, frozen=True)
class LoginResult:
    user: User
    token: str


class LoginUserUseCase:
    """Verify credentials, sign a token and persist its session.

    Storage errors from ``sessions.create`` propagate to the caller.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionRepository,
        password_hasher: PasswordHasher,
        codec: TokenCodec,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher
        self._codec = codec

    def execute(
        self,
        username: str,
        password: str,
        provenance: SessionProvenance | None = None,
    ) -> LoginResult:
        user = self._users.find_by_username(username)
        if user is None or not user.is_active:
            logger.info(f"auth.login: unknown or inactive username={username}")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: password mismatch user_id={user.id}")
            raise InvalidCredentialsError()

        token = self._codec.sign(user_id=user.id, username=user.username, role=user.role)
        self._sessions.create(user.id, token, provenance or SessionProvenance())
        return LoginResult(user=user, token=token)
