from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from nautilus.application.services.password_hashing import BcryptPasswordHasher
from nautilus.infrastructure.db import session_scope
from nautilus.infrastructure.db.models import Session, User
from nautilus.scripts import reset_password, sweep_sessions


def _add_session(user_id: int, token: str, expires_at: datetime) -> None:
    with session_scope() as db:
        db.add(Session(user_id=user_id, token=token, expires_at=expires_at))


def test_sweep_script_removes_expired(
    create_user: Callable[..., int], capsys: pytest.CaptureFixture[str]
) -> None:
    user_id = create_user("alice")
    now = datetime.now(UTC)
    _add_session(user_id, "old", now - timedelta(minutes=1))
    _add_session(user_id, "fresh", now + timedelta(hours=1))

    assert sweep_sessions.main() == 0
    assert "Removed 1 expired sessions" in capsys.readouterr().out

    with session_scope() as db:
        assert [row.token for row in db.query(Session)] == ["fresh"]


def test_reset_password_updates_hash_and_revokes(create_user: Callable[..., int]) -> None:
    user_id = create_user("alice")
    _add_session(user_id, "live", datetime.now(UTC) + timedelta(hours=1))

    assert reset_password.main(["alice", "--password", "a-new-password"]) == 0

    with session_scope() as db:
        row = db.get(User, user_id)
        assert BcryptPasswordHasher().verify("a-new-password", row.password_hash)
        assert db.query(Session).count() == 0


def test_reset_password_unknown_user(create_user: Callable[..., int]) -> None:
    assert reset_password.main(["ghost", "--password", "a-new-password"]) == 1


def test_reset_password_rejects_short_password(create_user: Callable[..., int]) -> None:
    create_user("alice")

    assert reset_password.main(["alice", "--password", "short"]) == 2
