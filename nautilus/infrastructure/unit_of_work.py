# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from nautilus.shared.errors import StorageIntegrityError, StorageUnavailableError
from nautilus.shared.logging import logger


@contextmanager
def unit_of_work_scope(
    factory: Callable[[], Session], operation: str = "db"
) -> Iterator[Session]:
    """Yield a session committed on success and rolled back on error.

    Constraint violations become ``StorageIntegrityError`` (500). Other
    SQLAlchemy failures become ``StorageUnavailableError`` so the HTTP layer
    answers 503 instead of treating them as a security outcome.
    """

    session = factory()
    logger.debug(f"uow[{operation}]: session opened")
    try:
        yield session
        session.commit()
        logger.debug(f"uow[{operation}]: committed")
    except IntegrityError as exc:
        logger.opt(exception=exc).error(f"uow[{operation}]: constraint violation, rolling back")
        session.rollback()
        raise StorageIntegrityError(operation) from exc
    except SQLAlchemyError as exc:
        logger.opt(exception=exc).error(f"uow[{operation}]: storage failure, rolling back")
        session.rollback()
        raise StorageUnavailableError(operation) from exc
    except Exception:
        logger.warning(f"uow[{operation}]: rollback due to error")
        session.rollback()
        raise
    finally:
        session.close()
        logger.debug(f"uow[{operation}]: session closed")


__all__ = ["unit_of_work_scope"]
