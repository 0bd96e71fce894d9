# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from nautilus.application.services.authentication import AuthContext
from nautilus.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from nautilus.application.use_cases.users.login_user import LoginUserUseCase
from nautilus.application.use_cases.users.logout_user import (
    LogoutEverywhereUseCase,
    LogoutUserUseCase,
)
from nautilus.domain.users.entities import SessionProvenance
from nautilus.domain.users.exceptions import InvalidCredentialsError
from nautilus.infrastructure.audit import AuditAction, audit_log
from nautilus.interfaces.http.auth import require_auth, token_fingerprint
from nautilus.interfaces.http.cookies import CookieTransport
from nautilus.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginDataDTO,
    LoginRequestDTO,
    LoginSuccessDTO,
    SessionsRemovedDTO,
    UserProfileDTO,
)
from nautilus.shared.errors.validation import raise_validation_error
from nautilus.shared.logging import logger
from nautilus.shared.middleware.request_logger import get_client_ip


def _request_provenance() -> SessionProvenance:
    return SessionProvenance(
        ip_address=get_client_ip(),
        user_agent=request.headers.get("User-Agent"),
    )


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        logout_everywhere_use_case: LogoutEverywhereUseCase,
        get_current_user_use_case: GetCurrentUserUseCase,
        cookies: CookieTransport,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._logout_everywhere_use_case = logout_everywhere_use_case
        self._get_current_user_use_case = get_current_user_use_case
        self._cookies = cookies

    def login(self) -> tuple[Response, int]:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        try:
            dto = LoginRequestDTO.model_validate(payload)
        except ValidationError as exc:
            raise_validation_error(exc)

        provenance = _request_provenance()
        try:
            result = self._login_use_case.execute(dto.username, dto.password, provenance)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=provenance.ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.user.id,
            ip_address=provenance.ip_address,
            details={"username": result.user.username},
        )

        body = LoginSuccessDTO(
            data=LoginDataDTO(user=result.user.public_profile(), token=result.token)
        )
        response = jsonify(body.model_dump(exclude_none=True))
        self._cookies.write(response, result.token)
        logger.info(f"auth.login: ok user_id={result.user.id} role={result.user.role.value}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        token = self._cookies.read(request)
        self._logout_use_case.execute(token)

        audit_log(
            AuditAction.LOGOUT,
            ip_address=get_client_ip(),
            details={"had_session": token is not None},
        )

        response = jsonify(
            AuthSuccessDTO(message="Logged out successfully").model_dump(exclude_none=True)
        )
        self._cookies.clear(response)
        logger.info(f"auth.logout: ok tok={token_fingerprint(token) if token else '-'}")
        return response, 200

    @require_auth
    def me(self, *, auth: AuthContext) -> tuple[Response, int]:
        user = self._get_current_user_use_case.execute(auth.user_id)
        body = UserProfileDTO(data=user.public_profile())
        return jsonify(body.model_dump(exclude_none=True)), 200

    @require_auth
    def logout_all(self, *, auth: AuthContext) -> tuple[Response, int]:
        removed = self._logout_everywhere_use_case.execute(auth.user_id)

        audit_log(
            AuditAction.LOGOUT_ALL,
            user_id=auth.user_id,
            ip_address=get_client_ip(),
            details={"removed": removed},
        )

        response = jsonify(SessionsRemovedDTO(removed=removed).model_dump(exclude_none=True))
        self._cookies.clear(response)
        logger.info(f"auth.logout_all: user_id={auth.user_id} removed={removed}")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        bp.add_url_rule("/logout-all", view_func=self.logout_all, methods=["POST"])
        return bp
