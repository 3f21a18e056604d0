"""
Deadlock retry

- MySQL 1213 / 1205 and PostgreSQL 40001 / 40P01 are detected
- Retries with exponential backoff, other errors propagate at once
- Gives up after ``max_attempts``
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from motel_booking.infrastructure.db.retry import (
    is_deadlock_error,
    retry_on_deadlock,
    with_deadlock_retry,
)


def _operational(message: str) -> OperationalError:
    return OperationalError("statement", "params", message, connection_invalidated=False)


class TestDeadlockDetection:
    @pytest.mark.parametrize(
        "message",
        [
            "(pymysql.err.OperationalError) (1213, 'Deadlock found when trying to get lock')",
            "(pymysql.err.OperationalError) (1205, 'Lock wait timeout exceeded')",
            "(sqlite3.OperationalError) database is locked",
        ],
    )
    def test_detects_retryable_messages(self, message):
        assert is_deadlock_error(_operational(message))

    def test_detects_postgres_sqlstate(self):
        orig = Mock()
        orig.sqlstate = "40P01"
        error = DBAPIError("statement", "params", orig, connection_invalidated=False)

        assert is_deadlock_error(error)

    def test_ignores_other_database_errors(self):
        assert not is_deadlock_error(_operational("no such table: rooms"))
        assert not is_deadlock_error(
            IntegrityError("statement", "params", "UNIQUE constraint failed", connection_invalidated=False)
        )

    def test_ignores_non_database_errors(self):
        assert not is_deadlock_error(ValueError("1213"))


class TestRetryOnDeadlock:
    @pytest.mark.asyncio
    async def test_succeeds_after_transient_deadlock(self):
        func = AsyncMock(side_effect=[_operational("(1213, 'Deadlock found')"), "booked"])

        with patch("motel_booking.infrastructure.db.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            result = await retry_on_deadlock(func, max_attempts=3, base_delay=0.1)

        assert result == "booked"
        assert func.await_count == 2
        sleep.assert_awaited_once_with(0.1)

    @pytest.mark.asyncio
    async def test_exponential_backoff_then_gives_up(self):
        func = AsyncMock(side_effect=_operational("(1213, 'Deadlock found')"))

        with patch("motel_booking.infrastructure.db.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(OperationalError):
                await retry_on_deadlock(func, max_attempts=3, base_delay=0.1)

        assert func.await_count == 3
        assert [call.args[0] for call in sleep.await_args_list] == [0.1, 0.2]

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self):
        func = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await retry_on_deadlock(func)

        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_decorator(self):
        calls = []

        @with_deadlock_retry(max_attempts=2, base_delay=0)
        async def confirm(reservation_id):
            calls.append(reservation_id)
            if len(calls) == 1:
                raise _operational("(1205, 'Lock wait timeout exceeded')")
            return reservation_id

        assert await confirm("r-1") == "r-1"
        assert calls == ["r-1", "r-1"]
