# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from nautilus.domain.users.exceptions import UserNotFoundError
from nautilus.domain.users.repositories import SessionRepository, UserRepository
from nautilus.shared.logging import logger


class RevokeUserSessionsUseCase:
    def __init__(self, user_repo: UserRepository, sessions: SessionRepository) -> None:
        self._user_repo = user_repo
        self._sessions = sessions

    def execute(self, user_id: int) -> int:
        user = self._user_repo.find_by_id(user_id)

        if not user:
            raise UserNotFoundError(context={"user_id": user_id})

        removed = self._sessions.delete_all_for_user(user_id)

        logger.info(
            f"admin: Revoked {removed} sessions for user_id={user_id} username={user.username}"
        )
        return removed


__all__ = ["RevokeUserSessionsUseCase"]
