# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Startup retries for infrastructure that may come up after the service."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from auth_service.shared.logging import logger


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        f"resilience: database not reachable (attempt={state.attempt_number}): "
        f"{type(exc).__name__ if exc else 'unknown'}"
    )


def connect_with_retry(engine: Engine, *, attempts: int, delay: float) -> None:
    """Block until the database answers ``SELECT 1`` or attempts run out."""

    retry = Retrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_fixed(delay),
        retry=retry_if_exception_type(OperationalError),
        before_sleep=_log_retry,
        reraise=True,
    )
    for attempt in retry:
        with attempt:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
    logger.info("resilience: database connection established")


__all__ = ["connect_with_retry"]
