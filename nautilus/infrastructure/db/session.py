# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker

from nautilus.shared.config import load_config
from nautilus.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


def build_engine(url: str) -> Engine:
    db = _config.database
    if url.startswith("sqlite"):
        connect_args: dict[str, object] = {
            "check_same_thread": False,
            "timeout": db.connect_timeout,
        }
    else:
        connect_args = {"connect_timeout": db.connect_timeout}
    return create_engine(
        url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        connect_args=connect_args,
    )


ENGINE: Engine = build_engine(_config.database.url)


SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


@contextmanager
def session_scope() -> Iterator:
    session = SessionLocal()
    logger.debug("db.session: opened scoped session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed scoped session")
    except Exception:
        logger.exception("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        SessionLocal.remove()
        logger.debug("db.session: closed scoped session")


def init_db() -> None:
    from nautilus.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=ENGINE)
    logger.info("Database schema ensured")
