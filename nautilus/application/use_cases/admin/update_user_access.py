# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from nautilus.domain.users.entities import Role, User
from nautilus.domain.users.exceptions import UserNotFoundError
from nautilus.domain.users.repositories import (
    PasswordHasher,
    SessionRepository,
    UserRepository,
)
from nautilus.shared.logging import logger


@dataclass(slots=True, frozen=True)
class AccessUpdate:
    password: str | None = None
    role: Role | None = None
    is_active: bool | None = None


@dataclass(slots=True, frozen=True)
class AccessUpdateResult:
    user: User
    sessions_revoked: int


class UpdateUserAccessUseCase:
    """Change credentials, role or active flag and sign the user out everywhere.

    Existing tokens embed the old role, so every change here deletes the
    user's sessions; the next login issues claims that match the new state.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        sessions: SessionRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._user_repo = user_repo
        self._sessions = sessions
        self._password_hasher = password_hasher

    def execute(self, user_id: int, update: AccessUpdate) -> AccessUpdateResult:
        password_hash = None
        if update.password:
            password_hash = self._password_hasher.hash(update.password)

        user = self._user_repo.update_access(
            user_id,
            password_hash=password_hash,
            role=update.role,
            is_active=update.is_active,
        )
        if user is None:
            raise UserNotFoundError(context={"user_id": user_id})

        revoked = self._sessions.delete_all_for_user(user_id)
        logger.info(
            f"admin: Updated access for user_id={user_id} "
            f"password_changed={password_hash is not None} role={user.role.value} "
            f"active={user.is_active} sessions_revoked={revoked}"
        )
        return AccessUpdateResult(user=user, sessions_revoked=revoked)


__all__ = ["AccessUpdate", "AccessUpdateResult", "UpdateUserAccessUseCase"]
