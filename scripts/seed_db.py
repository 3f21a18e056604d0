"""Create the schema and a demo motel with three rooms.

Usage: DATABASE_URL=... USE_IN_MEMORY=false python scripts/seed_db.py
"""

import asyncio
import logging
from decimal import Decimal
from uuid import UUID

from motel_booking.api.deps import AsyncSessionLocal, engine
from motel_booking.api.dependencies import build_use_cases
from motel_booking.application.interfaces.clock import SystemClock
from motel_booking.domain.entities.room import RoomType
from motel_booking.domain.value_objects.address import Address
from motel_booking.infrastructure.db.repositories.motel_repo_sql import MotelRepoSQL
from motel_booking.infrastructure.db.repositories.outbox_publisher_sql import (
    OutboxEventPublisherSQL,
)
from motel_booking.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from motel_booking.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from motel_booking.infrastructure.db.tables import metadata
from motel_booking.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from motel_booking.infrastructure.in_memory.payment_gateway import StubPaymentGateway

logger = logging.getLogger("seed_db")

DEMO_OWNER_ID = UUID("00000000-0000-4000-8000-000000000001")

ROOMS = [
    ("101", "Standard", 2, Decimal("50.00"), RoomType.STANDARD),
    ("201", "Suite", 4, Decimal("75.00"), RoomType.SUITE),
    ("301", "Premium", 2, Decimal("120.00"), RoomType.PREMIUM),
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Schema ready")

    async with AsyncSessionLocal() as session:
        use_cases = build_use_cases(
            motel_repo=MotelRepoSQL(session),
            reservation_repo=ReservationRepoSQL(session),
            payment_repo=PaymentRepoSQL(session),
            payment_gateway=StubPaymentGateway(),
            event_publisher=OutboxEventPublisherSQL(session),
            tx_manager=SQLAlchemyTransactionManager(session),
            clock=SystemClock(),
        )
        motel = await use_cases["manage_motels"].create(
            name="Motel Luna",
            address=Address("Av. Insurgentes Sur 1000", "Mexico City", "CDMX", "03100", "MX"),
            owner_id=DEMO_OWNER_ID,
            description="Demo motel",
            email="front@luna.example.com",
        )
        for number, name, capacity, price, room_type in ROOMS:
            room = await use_cases["manage_rooms"].add(
                motel_id=motel.id,
                room_number=number,
                name=name,
                capacity=capacity,
                price_per_hour=price,
                currency="USD",
                room_type=room_type,
            )
            logger.info("Seeded room %s (%s)", room.room_number, room.id)
    logger.info("Seeded motel %s", motel.id)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(seed())
