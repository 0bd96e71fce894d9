# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from nautilus.shared.logging import logger


class AuditAction(str, Enum):
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"
    SESSIONS_REVOKED = "sessions_revoked"
    SESSIONS_SWEPT = "sessions_swept"
    USER_ACCESS_UPDATED = "user_access_updated"
    PASSWORD_RESET = "password_reset"


_SENSITIVE_KEYS = {"password", "token", "secret", "hash", "cookie"}


def _sanitize_details(details: dict[str, Any]) -> dict[str, Any]:
    sanitized = {}
    for key, value in details.items():
        if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value
    return sanitized


def _store_audit_log(
    timestamp: datetime,
    action: str,
    user_id: int | None,
    ip_address: str | None,
    success: bool,
    details: dict[str, Any],
) -> None:
    from nautilus.infrastructure.db.models import AuditLog
    from nautilus.infrastructure.db.session import session_scope

    try:
        with session_scope() as db:
            db.add(
                AuditLog(
                    timestamp=timestamp,
                    action=action,
                    user_id=user_id,
                    ip_address=ip_address,
                    success=success,
                    details_json=json.dumps(details, default=str) if details else None,
                )
            )
    except SQLAlchemyError as db_error:
        # Audit persistence is best effort; the log line above already has the event.
        logger.warning(f"Failed to store audit log in database: {db_error}")


def audit_log(
    action: AuditAction,
    user_id: int | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    timestamp = datetime.now(UTC)
    safe_details = _sanitize_details(details) if details else {}

    message = f"AUDIT: {action.value} | user_id={user_id} | ip={ip_address} | success={success}"
    if safe_details:
        message += f" | details={safe_details}"

    if success:
        logger.info(message)
    else:
        logger.warning(message)

    _store_audit_log(
        timestamp=timestamp,
        action=action.value,
        user_id=user_id,
        ip_address=ip_address,
        success=success,
        details=safe_details,
    )


__all__ = ["AuditAction", "audit_log"]
