from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from motel_booking.application.interfaces.transaction_manager import TransactionManager


class SQLAlchemyTransactionManager(TransactionManager):
    """
    Commits when the outermost ``start()`` exits cleanly, rolls back on error.

    Nested ``start()`` calls join the running transaction. A transaction the
    session autobegan before the first ``start()`` (a read outside any block)
    is adopted rather than left dangling.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._depth = 0

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            if self._session.in_transaction():
                try:
                    yield
                except BaseException:
                    await self._session.rollback()
                    raise
                await self._session.commit()
            else:
                async with self._session.begin():
                    yield
        finally:
            self._depth = 0
