"""Use-cases for revoking sessions."""

from __future__ import annotations

from nautilus.domain.users.repositories import SessionRepository


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionRepository) -> None:
        self._sessions = sessions

    def execute(self, token: str | None) -> None:
        if token:
            self._sessions.delete(token)


class LogoutEverywhereUseCase:
    def __init__(self, *, sessions: SessionRepository) -> None:
        self._sessions = sessions

    def execute(self, user_id: int) -> int:
        return self._sessions.delete_all_for_user(user_id)
