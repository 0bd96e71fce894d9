# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import IdentityClaims, Role, Session, SessionProvenance, User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def update_access(
        self,
        user_id: int,
        *,
        password_hash: str | None = None,
        role: Role | None = None,
        is_active: bool | None = None,
    ) -> User | None: ...


class SessionRepository(Protocol):
    def create(self, user_id: int, token: str, provenance: SessionProvenance) -> Session: ...
    def find_live(self, token: str) -> Session | None: ...
    def delete(self, token: str) -> None: ...
    def delete_all_for_user(self, user_id: int) -> int: ...
    def sweep_expired(self) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenCodec(Protocol):
    def sign(self, *, user_id: int, username: str, role: Role) -> str: ...
    def verify(self, token: str) -> IdentityClaims | None: ...
