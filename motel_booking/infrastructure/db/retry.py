"""
Database retry utilities for transient lock failures.

Deadlocks and serialization failures are safe to retry when the whole unit of
work runs again inside a fresh transaction.
"""

import asyncio
import logging
from functools import wraps
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# MySQL error codes
MYSQL_DEADLOCK_ERROR = "1213"
MYSQL_LOCK_WAIT_TIMEOUT = "1205"
# PostgreSQL SQLSTATEs
POSTGRES_SERIALIZATION_FAILURE = "40001"
POSTGRES_DEADLOCK_DETECTED = "40P01"
# SQLite
SQLITE_LOCKED = "database is locked"

RETRYABLE_MARKERS = (
    MYSQL_DEADLOCK_ERROR,
    MYSQL_LOCK_WAIT_TIMEOUT,
    POSTGRES_SERIALIZATION_FAILURE,
    POSTGRES_DEADLOCK_DETECTED,
    SQLITE_LOCKED,
)


def is_deadlock_error(error: Exception) -> bool:
    """True for lock conflicts the database asks us to retry."""
    if not isinstance(error, (OperationalError, DBAPIError)):
        return False
    sqlstate = getattr(getattr(error, "orig", None), "sqlstate", None) or getattr(
        getattr(error, "orig", None), "pgcode", None
    )
    if sqlstate in (POSTGRES_SERIALIZATION_FAILURE, POSTGRES_DEADLOCK_DETECTED):
        return True
    error_str = str(error)
    return any(marker in error_str for marker in RETRYABLE_MARKERS)


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """
    Run ``func`` again on deadlock, with exponential backoff
    (``base_delay * 2 ** attempt``). Other errors propagate immediately.

    Example:
        async def book():
            return await use_case.execute(...)

        reservation = await retry_on_deadlock(book)
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except Exception as e:
            if not is_deadlock_error(e):
                raise

            if attempt == max_attempts - 1:
                logger.error(
                    "Database deadlock persists after max retries",
                    extra={"attempts": max_attempts, "error": str(e)},
                )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Database deadlock detected, retrying",
                extra={
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)

    raise RuntimeError("retry_on_deadlock called with max_attempts < 1")


def with_deadlock_retry(max_attempts: int = 3, base_delay: float = 0.1):
    """Decorator form of ``retry_on_deadlock`` for async functions."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            async def execute():
                return await func(*args, **kwargs)

            return await retry_on_deadlock(execute, max_attempts, base_delay)

        return wrapper

    return decorator
