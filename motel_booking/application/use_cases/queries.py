from datetime import datetime
from typing import Sequence
from uuid import UUID

from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.domain.entities.payment import Payment, PaymentStatus
from motel_booking.domain.entities.reservation import Reservation
from motel_booking.domain.errors import NotFoundError
from motel_booking.domain.value_objects.time_range import TimeRange


class ReservationQueries:
    def __init__(self, reservation_repo: ReservationRepo) -> None:
        self._reservation_repo = reservation_repo

    async def get(self, reservation_id: UUID) -> Reservation:
        reservation = await self._reservation_repo.get_by_id(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    async def by_user(self, user_id: UUID) -> Sequence[Reservation]:
        return await self._reservation_repo.list_by_user(user_id)

    async def by_motel(self, motel_id: UUID) -> Sequence[Reservation]:
        return await self._reservation_repo.list_by_motel(motel_id)

    async def by_room(self, room_id: UUID) -> Sequence[Reservation]:
        return await self._reservation_repo.list_by_room(room_id)


class PaymentQueries:
    def __init__(self, payment_repo: PaymentRepo, reservation_repo: ReservationRepo) -> None:
        self._payment_repo = payment_repo
        self._reservation_repo = reservation_repo

    async def get(self, payment_id: UUID) -> Payment:
        payment = await self._payment_repo.get_by_id(payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        return payment

    async def by_reservation(self, reservation_id: UUID) -> Sequence[Payment]:
        return await self._payment_repo.list_by_reservation(reservation_id)

    async def by_status(self, status: PaymentStatus) -> Sequence[Payment]:
        return await self._payment_repo.list_by_status(status)

    async def by_user(self, user_id: UUID) -> Sequence[Payment]:
        """Payments for every reservation the user made."""
        reservations = await self._reservation_repo.list_by_user(user_id)
        if not reservations:
            return []
        return await self._payment_repo.list_by_reservations([r.id for r in reservations])

    async def created_between(self, start: datetime, end: datetime) -> Sequence[Payment]:
        window = TimeRange(start, end)
        return await self._payment_repo.list_created_between(window.start, window.end)
