"""Drop and recreate every table. Destroys all data."""

import asyncio
import logging

from motel_booking.api.deps import engine
from motel_booking.infrastructure.db.tables import metadata

logger = logging.getLogger("reset_db")


async def reset():
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        logger.info("Dropped %s", ", ".join(t.name for t in reversed(metadata.sorted_tables)))
        await conn.run_sync(metadata.create_all)
        logger.info("Recreated all tables")
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(reset())
