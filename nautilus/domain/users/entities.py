# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    PROGRAMMER = "programmer"


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    password_hash: str
    role: Role
    is_active: bool
    full_name: str | None = None
    email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login: datetime | None = None

    def public_profile(self) -> dict[str, object]:
        """Serializable view without the password hash."""
        return {
            "user_id": self.id,
            "username": self.username,
            "role": self.role.value,
            "full_name": self.full_name,
            "email": self.email,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }


@dataclass(slots=True, frozen=True)
class SessionProvenance:

    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(slots=True, frozen=True)
class Session:

    id: int
    user_id: int
    token: str
    expires_at: datetime
    created_at: datetime | None = None
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(slots=True, frozen=True)
class IdentityClaims:
    """Identity carried inside a signed token."""

    user_id: int
    username: str
    role: Role
    expires_at: datetime
