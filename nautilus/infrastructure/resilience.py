# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bounded retries for transient storage failures."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from nautilus.shared.config.settings import ResilienceConfig
from nautilus.shared.errors import StorageUnavailableError
from nautilus.shared.logging import logger

T = TypeVar("T")

_TRANSIENT = (OperationalError, DisconnectionError, PoolTimeoutError)


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, StorageUnavailableError) and isinstance(exc.__cause__, _TRANSIENT)


def retry_transient(
    func: Callable[[], T],
    *,
    config: ResilienceConfig,
    operation: str,
) -> T:
    """Run ``func`` retrying transient storage errors with exponential backoff.

    The last failure is re-raised unchanged once attempts are exhausted.
    """

    retrying = Retrying(
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait_exponential(multiplier=config.backoff_base, max=config.backoff_cap),
        retry=retry_if_exception(_is_transient),
        reraise=True,
    )
    for attempt in retrying:
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.warning(
                    f"resilience: retrying {operation} "
                    f"attempt={attempt.retry_state.attempt_number}"
                )
            return func()
    raise RuntimeError(f"resilience: {operation} exhausted without result")  # pragma: no cover


__all__ = ["retry_transient"]
