"""In-memory adapters for local runs and tests."""

from motel_booking.infrastructure.in_memory.event_publisher import InMemoryEventPublisher
from motel_booking.infrastructure.in_memory.motel_repo import InMemoryMotelRepo
from motel_booking.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from motel_booking.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from motel_booking.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from motel_booking.infrastructure.in_memory.transaction_manager import NoopTransactionManager

__all__ = [
    # Repositories
    "InMemoryMotelRepo",
    "InMemoryReservationRepo",
    "InMemoryPaymentRepo",
    # Gateways
    "StubPaymentGateway",
    # Infrastructure
    "InMemoryEventPublisher",
    "NoopTransactionManager",
]
