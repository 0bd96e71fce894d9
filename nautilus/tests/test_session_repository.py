from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from nautilus.domain.users.entities import SessionProvenance
from nautilus.infrastructure.db import SessionLocal, session_scope
from nautilus.infrastructure.db import models
from nautilus.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
)
from nautilus.shared.config.settings import AuthConfig, ResilienceConfig
from nautilus.shared.errors import StorageIntegrityError, StorageUnavailableError


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime.now(UTC).replace(microsecond=0))


def _repository(
    clock: FakeClock,
    *,
    ttl: int = 3600,
    recheck_active: bool = True,
    factory: Callable = SessionLocal,
) -> SqlAlchemySessionRepository:
    return SqlAlchemySessionRepository(
        factory,
        auth=AuthConfig(token_ttl_seconds=ttl, recheck_active=recheck_active),
        resilience=ResilienceConfig(max_retries=2, backoff_base=0.01, backoff_cap=0.02),
        clock=clock,
    )


def test_create_then_find_live(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    repo = _repository(clock)

    created = repo.create(user_id, "tok-1", SessionProvenance("10.0.0.1", "pytest"))
    found = repo.find_live("tok-1")

    assert found is not None
    assert found.id == created.id
    assert found.user_id == user_id
    assert found.ip_address == "10.0.0.1"
    assert found.user_agent == "pytest"
    assert found.expires_at == clock.now + timedelta(seconds=3600)


def test_create_records_last_login(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    _repository(clock).create(user_id, "tok-1", SessionProvenance())

    user = SqlAlchemyUserRepository(SessionLocal).find_by_id(user_id)

    assert user is not None
    assert user.last_login == clock.now


def test_find_live_ignores_unknown_token(create_user, clock: FakeClock) -> None:
    create_user("alice")

    assert _repository(clock).find_live("missing") is None


def test_find_live_ignores_expired(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    repo = _repository(clock, ttl=60)
    repo.create(user_id, "tok-1", SessionProvenance())

    clock.advance(60)

    assert repo.find_live("tok-1") is None


def test_delete_is_idempotent(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    repo = _repository(clock)
    repo.create(user_id, "tok-1", SessionProvenance())

    repo.delete("tok-1")
    repo.delete("tok-1")
    repo.delete("never-existed")

    assert repo.find_live("tok-1") is None


def test_delete_all_for_user(create_user, clock: FakeClock) -> None:
    alice = create_user("alice")
    bob = create_user("bob")
    repo = _repository(clock)
    repo.create(alice, "tok-a1", SessionProvenance())
    repo.create(alice, "tok-a2", SessionProvenance())
    repo.create(bob, "tok-b1", SessionProvenance())

    assert repo.delete_all_for_user(alice) == 2
    assert repo.delete_all_for_user(alice) == 0
    assert repo.find_live("tok-a1") is None
    assert repo.find_live("tok-b1") is not None


def test_sweep_removes_only_expired(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    short = _repository(clock, ttl=60)
    long = _repository(clock, ttl=3600)
    short.create(user_id, "tok-short", SessionProvenance())
    long.create(user_id, "tok-long", SessionProvenance())

    clock.advance(120)

    assert long.sweep_expired() == 1
    assert long.sweep_expired() == 0
    assert long.find_live("tok-long") is not None
    with session_scope() as db:
        assert db.query(models.Session).count() == 1


def test_inactive_user_sessions_ignored_when_rechecking(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    rechecking = _repository(clock, recheck_active=True)
    trusting = _repository(clock, recheck_active=False)
    rechecking.create(user_id, "tok-1", SessionProvenance())

    SqlAlchemyUserRepository(SessionLocal).update_access(user_id, is_active=False)

    assert rechecking.find_live("tok-1") is None
    assert trusting.find_live("tok-1") is not None


def test_duplicate_token_is_not_retryable(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    repo = _repository(clock)
    repo.create(user_id, "tok-1", SessionProvenance())

    with pytest.raises(StorageIntegrityError) as excinfo:
        repo.create(user_id, "tok-1", SessionProvenance())

    assert not isinstance(excinfo.value, StorageUnavailableError)
    assert excinfo.value.status == 500
    assert repo.delete_all_for_user(user_id) == 1


class _FlakySession:
    def __init__(self, real, failures: list[int]) -> None:
        self._real = real
        self._failures = failures

    def query(self, *args, **kwargs):
        if self._failures[0] > 0:
            self._failures[0] -= 1
            raise OperationalError("SELECT", {}, Exception("database is locked"))
        return self._real.query(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._real, name)


def test_find_live_retries_transient_errors(create_user, clock: FakeClock) -> None:
    user_id = create_user("alice")
    _repository(clock).create(user_id, "tok-1", SessionProvenance())
    failures = [1]
    flaky = _repository(clock, factory=lambda: _FlakySession(SessionLocal(), failures))

    assert flaky.find_live("tok-1") is not None
    assert failures == [0]


def test_find_live_gives_up_after_retries(create_user, clock: FakeClock) -> None:
    create_user("alice")
    failures = [10]
    flaky = _repository(clock, factory=lambda: _FlakySession(SessionLocal(), failures))

    with pytest.raises(StorageUnavailableError):
        flaky.find_live("tok-1")
    assert failures == [7]
