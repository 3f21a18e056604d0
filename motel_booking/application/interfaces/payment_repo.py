from datetime import datetime
from typing import Sequence
from uuid import UUID

from motel_booking.domain.entities.payment import Payment, PaymentStatus


class PaymentRepo:
    async def add(self, payment: Payment) -> Payment:
        raise NotImplementedError

    async def update(self, payment: Payment, expected_status: PaymentStatus | None = None) -> Payment:
        """
        Persist ``payment``.

        With ``expected_status`` the write only lands while the stored status
        still equals it; otherwise ``StaleStateError`` is raised.
        """
        raise NotImplementedError

    async def get_by_id(self, payment_id: UUID) -> Payment | None:
        raise NotImplementedError

    async def get_for_update(self, payment_id: UUID) -> Payment | None:
        """Like ``get_by_id`` but locks the row until the transaction ends."""
        raise NotImplementedError

    async def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: UUID) -> Sequence[Payment]:
        """Payments of a reservation, oldest first."""
        raise NotImplementedError

    async def list_by_reservations(self, reservation_ids: Sequence[UUID]) -> Sequence[Payment]:
        raise NotImplementedError

    async def list_by_status(self, status: PaymentStatus) -> Sequence[Payment]:
        raise NotImplementedError

    async def list_created_between(self, start: datetime, end: datetime) -> Sequence[Payment]:
        """Payments created in ``[start, end)``, oldest first."""
        raise NotImplementedError
