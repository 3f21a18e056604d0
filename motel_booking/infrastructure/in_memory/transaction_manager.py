from contextlib import asynccontextmanager

from motel_booking.application.interfaces.transaction_manager import TransactionManager


class NoopTransactionManager(TransactionManager):
    """
    Marks boundaries without isolation. Repositories store snapshots at each
    write, so use cases validate before their first write.
    """

    @asynccontextmanager
    async def start(self):
        yield
