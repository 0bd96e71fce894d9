# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import IdentityClaims, Role, Session, SessionProvenance, User
from .users.exceptions import (
    ForbiddenError,
    InvalidCredentialsError,
    UnauthorizedError,
    UserNotFoundError,
)

__all__ = [
    "IdentityClaims",
    "Role",
    "Session",
    "SessionProvenance",
    "User",
    "ForbiddenError",
    "InvalidCredentialsError",
    "UnauthorizedError",
    "UserNotFoundError",
]
