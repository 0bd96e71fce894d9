from __future__ import annotations

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="nautilus-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'test.db')}")
os.environ.setdefault("LOG_FILE", os.path.join(_TMP, "test.log"))
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789abcdef0123456789abcdef")
os.environ.setdefault("AUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("RESILIENCE_BACKOFF_BASE", "0.01")

from collections.abc import Callable, Iterator  # noqa: E402

import pytest  # noqa: E402

from nautilus.application.services.password_hashing import BcryptPasswordHasher  # noqa: E402
from nautilus.domain.users.entities import Role  # noqa: E402
from nautilus.infrastructure.db import ENGINE, Base, session_scope  # noqa: E402
from nautilus.infrastructure.db import models  # noqa: E402

TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_database() -> Iterator[None]:
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def create_user() -> Callable[..., int]:
    hasher = BcryptPasswordHasher(rounds=4)

    def _create(
        username: str,
        password: str = TEST_PASSWORD,
        role: Role = Role.PROGRAMMER,
        is_active: bool = True,
    ) -> int:
        with session_scope() as db:
            row = models.User(
                username=username,
                password_hash=hasher.hash(password),
                role=role.value,
                is_active=is_active,
            )
            db.add(row)
            db.flush()
            return row.id

    return _create
