# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from nautilus.domain.users.repositories import SessionRepository
from nautilus.shared.logging import logger


class SweepExpiredSessionsUseCase:
    def __init__(self, sessions: SessionRepository) -> None:
        self._sessions = sessions

    def execute(self) -> int:
        removed = self._sessions.sweep_expired()
        logger.info(f"sessions.sweep: removed {removed} expired sessions")
        return removed


__all__ = ["SweepExpiredSessionsUseCase"]
