# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from nautilus.application.services.authentication import AuthContext
from nautilus.application.use_cases.admin.revoke_user_sessions import RevokeUserSessionsUseCase
from nautilus.application.use_cases.admin.sweep_sessions import SweepExpiredSessionsUseCase
from nautilus.application.use_cases.admin.update_user_access import (
    AccessUpdate,
    UpdateUserAccessUseCase,
)
from nautilus.infrastructure.audit import AuditAction, audit_log
from nautilus.interfaces.http.auth import require_admin
from nautilus.interfaces.http.dto.admin import UserAccessUpdateDTO
from nautilus.interfaces.http.dto.auth import SessionsRemovedDTO, UserProfileDTO
from nautilus.shared.errors.validation import raise_validation_error
from nautilus.shared.middleware.request_logger import get_client_ip


class AdminController:
    def __init__(
        self,
        *,
        sweep_sessions: SweepExpiredSessionsUseCase,
        revoke_user_sessions: RevokeUserSessionsUseCase,
        update_user_access: UpdateUserAccessUseCase,
    ) -> None:
        self._sweep_sessions = sweep_sessions
        self._revoke_user_sessions = revoke_user_sessions
        self._update_user_access = update_user_access

    @require_admin
    def sweep(self, *, auth: AuthContext) -> tuple[Response, int]:
        removed = self._sweep_sessions.execute()
        audit_log(
            AuditAction.SESSIONS_SWEPT,
            user_id=auth.user_id,
            ip_address=get_client_ip(),
            details={"removed": removed},
        )
        return jsonify(SessionsRemovedDTO(removed=removed).model_dump(exclude_none=True)), 200

    @require_admin
    def revoke_sessions(self, user_id: int, *, auth: AuthContext) -> tuple[Response, int]:
        removed = self._revoke_user_sessions.execute(user_id)
        audit_log(
            AuditAction.SESSIONS_REVOKED,
            user_id=auth.user_id,
            ip_address=get_client_ip(),
            details={"target_user_id": user_id, "removed": removed},
        )
        return jsonify(SessionsRemovedDTO(removed=removed).model_dump(exclude_none=True)), 200

    @require_admin
    def update_access(self, user_id: int, *, auth: AuthContext) -> tuple[Response, int]:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        try:
            dto = UserAccessUpdateDTO.model_validate(payload)
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._update_user_access.execute(
            user_id,
            AccessUpdate(password=dto.password, role=dto.role, is_active=dto.is_active),
        )
        audit_log(
            AuditAction.USER_ACCESS_UPDATED,
            user_id=auth.user_id,
            ip_address=get_client_ip(),
            details={
                "target_user_id": user_id,
                "credentials_changed": dto.password is not None,
                "role": dto.role.value if dto.role else None,
                "is_active": dto.is_active,
                "sessions_revoked": result.sessions_revoked,
            },
        )
        body = UserProfileDTO(
            data=result.user.public_profile(),
            message="User updated successfully",
        )
        return jsonify(body.model_dump(exclude_none=True)), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("admin", __name__, url_prefix="/api/admin")
        bp.add_url_rule("/sessions/sweep", view_func=self.sweep, methods=["POST"])
        bp.add_url_rule(
            "/users/<int:user_id>/sessions", view_func=self.revoke_sessions, methods=["DELETE"]
        )
        bp.add_url_rule(
            "/users/<int:user_id>/access", view_func=self.update_access, methods=["PUT"]
        )
        return bp
