# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request authentication and authorization guards.

Guarded handlers receive the resolved identity as an ``auth`` keyword
argument (an :class:`AuthContext`). A missing or revoked session answers
401 ``unauthorized``; an authenticated caller without the required role
answers 403 ``forbidden``. The wrapped handler never runs in either case.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import Flask, Request, current_app, g, request

from nautilus.application.services.authentication import AuthContext, AuthenticationService
from nautilus.domain.users.entities import Role
from nautilus.domain.users.exceptions import ForbiddenError, UnauthorizedError
from nautilus.interfaces.http.cookies import CookieTransport
from nautilus.shared.logging import logger, set_request_user

EXTENSION_KEY = "nautilus.authenticator"


class RequestAuthenticator:
    def __init__(self, *, service: AuthenticationService, cookies: CookieTransport) -> None:
        self._service = service
        self._cookies = cookies

    @property
    def cookies(self) -> CookieTransport:
        return self._cookies

    def authenticate(self, req: Request) -> AuthContext | None:
        return self._service.authenticate(self._cookies.read(req))


def install_authenticator(app: Flask, authenticator: RequestAuthenticator) -> None:
    app.extensions[EXTENSION_KEY] = authenticator


def current_authenticator() -> RequestAuthenticator:
    return current_app.extensions[EXTENSION_KEY]


def token_fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()[:8]


def _resolve_identity() -> AuthContext:
    ctx = current_authenticator().authenticate(request)
    if ctx is None:
        logger.warning(f"Auth failed on {request.method} {request.path}")
        raise UnauthorizedError()
    g.user_id = ctx.user_id
    set_request_user(ctx.user_id)
    return ctx


def require_auth(func: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        kwargs["auth"] = _resolve_identity()
        return func(*args, **kwargs)

    return wrapper


def require_role(*roles: Role | str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    allowed = frozenset(Role(role) for role in roles)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            ctx = _resolve_identity()
            if ctx.role not in allowed:
                logger.warning(
                    f"Access denied: user {ctx.user_id} role={ctx.role.value} "
                    f"on {request.method} {request.path}"
                )
                raise ForbiddenError()
            kwargs["auth"] = ctx
            return func(*args, **kwargs)

        return wrapper

    return decorator


require_admin = require_role(Role.ADMIN)


__all__ = [
    "RequestAuthenticator",
    "current_authenticator",
    "install_authenticator",
    "require_admin",
    "require_auth",
    "require_role",
    "token_fingerprint",
]
