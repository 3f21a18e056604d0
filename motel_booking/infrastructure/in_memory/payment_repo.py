from datetime import datetime
from typing import Sequence
from uuid import UUID

from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.domain.entities.payment import Payment, PaymentStatus
from motel_booking.domain.errors import NotFoundError, StaleStateError
from motel_booking.infrastructure.in_memory._snapshot import snapshot


class InMemoryPaymentRepo(PaymentRepo):
    def __init__(self) -> None:
        self.payments: dict[UUID, Payment] = {}

    async def add(self, payment: Payment) -> Payment:
        self.payments[payment.id] = snapshot(payment)
        return payment

    async def update(self, payment: Payment, expected_status: PaymentStatus | None = None) -> Payment:
        stored = self.payments.get(payment.id)
        if stored is None:
            raise NotFoundError("Payment", payment.id)
        if expected_status is not None and stored.status != expected_status:
            raise StaleStateError("Payment", payment.id, expected_status.value, stored.status.value)
        self.payments[payment.id] = snapshot(payment)
        return payment

    async def get_by_id(self, payment_id: UUID) -> Payment | None:
        payment = self.payments.get(payment_id)
        return snapshot(payment) if payment else None

    async def get_for_update(self, payment_id: UUID) -> Payment | None:
        return await self.get_by_id(payment_id)

    async def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        for payment in self.payments.values():
            if payment.transaction_id == transaction_id:
                return snapshot(payment)
        return None

    async def list_by_reservation(self, reservation_id: UUID) -> Sequence[Payment]:
        # Insertion order is creation order.
        return [snapshot(p) for p in self.payments.values() if p.reservation_id == reservation_id]

    async def list_by_reservations(self, reservation_ids: Sequence[UUID]) -> Sequence[Payment]:
        wanted = set(reservation_ids)
        return [snapshot(p) for p in self.payments.values() if p.reservation_id in wanted]

    async def list_by_status(self, status: PaymentStatus) -> Sequence[Payment]:
        return [snapshot(p) for p in self.payments.values() if p.status == status]

    async def list_created_between(self, start: datetime, end: datetime) -> Sequence[Payment]:
        return [
            snapshot(p)
            for p in self.payments.values()
            if p.created_at is not None and start <= p.created_at < end
        ]
