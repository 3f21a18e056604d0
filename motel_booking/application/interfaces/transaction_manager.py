from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class TransactionManager(Protocol):
    """
    Unit of work boundary for a use case.

    A nested ``start()`` joins the outer one. Leaving the outermost block with
    an exception discards every write made inside it, so an overlap check and
    the insert it guards either both land or neither does.
    """

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield
