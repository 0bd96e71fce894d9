# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import importlib
from typing import Any, Protocol, cast

from flask import Flask

from nautilus.infrastructure.container import Container, container as default_container
from nautilus.infrastructure.db import init_db
from nautilus.interfaces.http.auth import install_authenticator
from nautilus.shared.logging import logger, setup_logging
from nautilus.shared.middleware.error_handler import configure_error_handling
from nautilus.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app(container: Container | None = None) -> Flask:
    container = container or default_container
    config = container.config

    init_db()
    setup_logging(debug_mode=config.debug_logging)

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)

    app.config.update(SECRET_KEY=config.secret_key)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    install_authenticator(app, container.request_authenticator)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.admin_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
