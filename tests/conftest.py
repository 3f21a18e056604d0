"""
Shared fixtures.

- In-memory adapters and a frozen clock for use-case tests
- FastAPI TestClient over the in-memory bundle for endpoint tests
- SQLite in-memory engine for repository tests
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from motel_booking.api.dependencies import build_use_cases, in_memory_bundle
from motel_booking.application.interfaces.clock import FakeClock
from motel_booking.domain.entities.motel import Motel
from motel_booking.domain.entities.room import Room
from motel_booking.domain.value_objects.address import Address
from motel_booking.domain.value_objects.money import Money
from motel_booking.infrastructure.db.engine import build_sessionmaker
from motel_booking.infrastructure.db.tables import metadata
from motel_booking.infrastructure.in_memory.event_publisher import InMemoryEventPublisher
from motel_booking.infrastructure.in_memory.motel_repo import InMemoryMotelRepo
from motel_booking.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from motel_booking.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from motel_booking.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from motel_booking.infrastructure.in_memory.transaction_manager import NoopTransactionManager

NOW = datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)


def _at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    return datetime(2030, 1, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def at():
    """Builds times on the frozen test day: ``at(10)`` is 2030-01-01 10:00 UTC."""
    return _at


# ============================================================================
# IN-MEMORY USE CASES
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def motel_repo() -> InMemoryMotelRepo:
    return InMemoryMotelRepo()


@pytest.fixture
def reservation_repo() -> InMemoryReservationRepo:
    return InMemoryReservationRepo()


@pytest.fixture
def payment_repo() -> InMemoryPaymentRepo:
    return InMemoryPaymentRepo()


@pytest.fixture
def gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest.fixture
def publisher() -> InMemoryEventPublisher:
    return InMemoryEventPublisher()


@pytest.fixture
def use_cases(motel_repo, reservation_repo, payment_repo, gateway, publisher, clock) -> dict:
    return build_use_cases(
        motel_repo=motel_repo,
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        payment_gateway=gateway,
        event_publisher=publisher,
        tx_manager=NoopTransactionManager(),
        clock=clock,
    )


@pytest_asyncio.fixture
async def motel(motel_repo) -> Motel:
    motel = Motel(
        name="Motel Luna",
        address=Address("Av. Siempre Viva 742", "Springfield", "IL", "62704", "US"),
        owner_id=uuid4(),
        created_at=NOW,
        updated_at=NOW,
    )
    await motel_repo.add_motel(motel)
    return motel


@pytest_asyncio.fixture
async def room(motel_repo, motel) -> Room:
    """Room R: capacity 2 at $50.00 per hour."""
    room = Room(
        motel_id=motel.id,
        room_number="101",
        name="Room R",
        capacity=2,
        price_per_hour=Money(Decimal("50.00"), "USD"),
        created_at=NOW,
        updated_at=NOW,
    )
    await motel_repo.add_room(room)
    return room


@pytest_asyncio.fixture
async def suite(motel_repo, motel) -> Room:
    """Suite at $75.00 per hour for four guests."""
    room = Room(
        motel_id=motel.id,
        room_number="201",
        name="Suite",
        capacity=4,
        price_per_hour=Money(Decimal("75.00"), "USD"),
        created_at=NOW,
        updated_at=NOW,
    )
    await motel_repo.add_room(room)
    return room


# ============================================================================
# HTTP CLIENT
# ============================================================================


@pytest.fixture
def client():
    """TestClient over a fresh in-memory bundle."""
    from motel_booking.main import app

    in_memory_bundle.cache_clear()
    with TestClient(app) as test_client:
        yield test_client
    in_memory_bundle.cache_clear()


# ============================================================================
# SQLITE
# ============================================================================


@pytest_asyncio.fixture
async def sql_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    session_maker = build_sessionmaker(engine)
    async with session_maker() as session:
        yield session
    await engine.dispose()


@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """Breakers are module-level; a test that trips one must not leak into the next."""
    from motel_booking.infrastructure.circuit_breaker import mercadopago_breaker

    mercadopago_breaker.close()
    yield
    mercadopago_breaker.close()
