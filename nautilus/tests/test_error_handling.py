from __future__ import annotations

from flask import Flask

from nautilus.domain.users.exceptions import UserNotFoundError
from nautilus.shared.middleware.error_handler import configure_error_handling
from nautilus.shared.middleware.request_logger import configure_request_logging


def _app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("unexpected")

    @app.get("/missing")
    def missing():
        raise UserNotFoundError(context={"user_id": 9})

    return app


def test_unexpected_error_is_500_with_request_id() -> None:
    with _app().test_client() as client:
        response = client.get("/boom", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 500
    assert response.get_json() == {
        "success": False,
        "error": "internal_error",
        "request_id": "req-42",
    }


def test_domain_error_keeps_context() -> None:
    with _app().test_client() as client:
        response = client.get("/missing")

    assert response.status_code == 404
    assert response.get_json() == {
        "success": False,
        "error": "user_not_found",
        "context": {"user_id": 9},
    }


def test_unknown_route_stays_plain_404() -> None:
    with _app().test_client() as client:
        assert client.get("/nope").status_code == 404
