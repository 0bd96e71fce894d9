from __future__ import annotations

from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from nautilus.application.use_cases.users.login_user import LoginResult, LoginUserUseCase
from nautilus.domain.users.entities import Role, User
from nautilus.domain.users.exceptions import InvalidCredentialsError
from nautilus.interfaces.http.controllers.auth_controller import AuthController
from nautilus.interfaces.http.cookies import CookieTransport
from nautilus.shared.errors import StorageIntegrityError, StorageUnavailableError
from nautilus.shared.middleware.error_handler import configure_error_handling


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _cookies(secure: bool = False) -> CookieTransport:
    return CookieTransport(name="auth_token", max_age=604800, secure=secure)


def _controller(login_use_case, logout_use_case=None, cookies=None) -> AuthController:
    return AuthController(
        login_use_case=cast(LoginUserUseCase, login_use_case),
        logout_use_case=logout_use_case or MagicMock(),
        logout_everywhere_use_case=MagicMock(),
        get_current_user_use_case=MagicMock(),
        cookies=cookies or _cookies(),
    )


def _alice() -> User:
    return User(id=1, username="alice", password_hash="hash", role=Role.ADMIN, is_active=True)


def test_login_endpoint_sets_cookie(flask_app: Flask) -> None:
    login_called: dict[str, tuple] = {}

    class StubLogin:
        def execute(self, username, password, provenance):
            login_called["args"] = (username, password, provenance)
            return LoginResult(user=_alice(), token="token123")

    flask_app.register_blueprint(_controller(StubLogin()).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login",
            json={"username": " alice ", "password": "secret123"},
            headers={"User-Agent": "pytest-agent", "X-Forwarded-For": "9.9.9.9, 10.0.0.1"},
        )

    assert response.status_code == 200
    username, password, provenance = login_called["args"]
    assert (username, password) == ("alice", "secret123")
    assert provenance.ip_address == "9.9.9.9"
    assert provenance.user_agent == "pytest-agent"

    body = response.get_json()
    assert body["success"] is True
    assert body["data"]["token"] == "token123"
    assert body["data"]["user"]["username"] == "alice"
    assert "password_hash" not in body["data"]["user"]

    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("auth_token=token123")
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie
    assert "Path=/" in cookie
    assert "Max-Age=604800" in cookie
    assert "Secure" not in cookie


def test_secure_cookie_flag(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = LoginResult(user=_alice(), token="token123")
    flask_app.register_blueprint(_controller(login, cookies=_cookies(secure=True)).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "alice", "password": "x"})

    assert "Secure" in response.headers["Set-Cookie"]


def test_login_invalid_payload_returns_422(flask_app: Flask) -> None:
    login = MagicMock()
    flask_app.register_blueprint(_controller(login).as_blueprint())

    with flask_app.test_client() as client:
        missing = client.post("/api/auth/login", json={"username": "alice"})
        blank = client.post("/api/auth/login", json={"username": "   ", "password": "x"})
        not_json = client.post("/api/auth/login", data="nope")

    for response in (missing, blank, not_json):
        assert response.status_code == 422
        assert response.get_json()["error"] == "validation_error"
    assert "password" in missing.get_json()["context"]["fields"]
    login.execute.assert_not_called()


def test_login_bad_credentials_sets_no_cookie(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(_controller(login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "alice", "password": "bad"})

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "invalid_credentials"}
    assert "Set-Cookie" not in response.headers


def test_login_storage_failure_is_503_without_cookie(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = StorageUnavailableError("sessions.create")
    flask_app.register_blueprint(_controller(login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "alice", "password": "x"})

    assert response.status_code == 503
    assert response.get_json()["error"] == "storage_unavailable"
    assert "Set-Cookie" not in response.headers


def test_logout_clears_cookie_even_without_session(flask_app: Flask) -> None:
    logout = MagicMock()
    flask_app.register_blueprint(_controller(MagicMock(), logout_use_case=logout).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "message": "Logged out successfully"}
    logout.execute.assert_called_once_with(None)
    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("auth_token=;")
    assert "Max-Age=0" in cookie


def test_logout_deletes_presented_token(flask_app: Flask) -> None:
    logout = MagicMock()
    flask_app.register_blueprint(_controller(MagicMock(), logout_use_case=logout).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("auth_token", "token123")
        client.post("/api/auth/logout")

    logout.execute.assert_called_once_with("token123")


def test_login_constraint_violation_is_500_without_retry_hint(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = StorageIntegrityError("sessions.create")
    flask_app.register_blueprint(_controller(login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "alice", "password": "x"})

    assert response.status_code == 500
    assert response.get_json()["error"] == "storage_conflict"
    assert "Retry-After" not in response.headers
    assert "Set-Cookie" not in response.headers
