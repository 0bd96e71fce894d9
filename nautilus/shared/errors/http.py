# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from nautilus.shared.config import load_config
from nautilus.shared.logging import get_correlation_id, logger

from .base import AppError, InfrastructureError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    if error.status == HTTPStatus.SERVICE_UNAVAILABLE:
        response.headers["Retry-After"] = "1"
    return response, error.status


def register_error_handler(
    app, *, default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
) -> None:
    config = load_config()
    debug_mode = config.debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if isinstance(exc, InfrastructureError):
            cause = exc.__cause__
            logger.error(
                f"Infrastructure error {exc.code} on {request.method} {request.path}: "
                f"{type(cause).__name__ if cause else '-'}: {cause}"
            )
        elif debug_mode:
            logger.debug(f"Handled application error {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        forwarded = request.headers.get("X-Forwarded-For")
        ip_address = forwarded.split(",")[0].strip() if forwarded else (request.remote_addr or "unknown")
        user_id = getattr(g, "user_id", None)

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {ip_address}, user={user_id}, "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")

        response = jsonify(
            {"success": False, "error": "internal_error", "request_id": get_correlation_id()}
        )
        return response, default_status
