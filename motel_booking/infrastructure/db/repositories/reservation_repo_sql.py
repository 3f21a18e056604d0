from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.domain.entities.reservation import (
    BLOCKING_STATUSES,
    Reservation,
    ReservationStatus,
)
from motel_booking.domain.errors import BookingConflictError, NotFoundError
from motel_booking.domain.value_objects.money import Money
from motel_booking.domain.value_objects.time_range import TimeRange
from motel_booking.infrastructure.db.tables import reservations, rooms

_BLOCKING = [status.value for status in BLOCKING_STATUSES]


def _values(reservation: Reservation) -> dict[str, Any]:
    return {
        "motel_id": str(reservation.motel_id),
        "room_id": str(reservation.room_id),
        "user_id": str(reservation.user_id),
        "start_time": reservation.time_range.start,
        "end_time": reservation.time_range.end,
        "status": reservation.status.value,
        "total_amount": reservation.total_amount.amount,
        "currency": reservation.total_amount.currency,
        "payment_id": str(reservation.payment_id) if reservation.payment_id else None,
        "special_requests": reservation.special_requests,
        "check_in_time": reservation.check_in_time,
        "check_out_time": reservation.check_out_time,
        "created_at": reservation.created_at,
        "updated_at": reservation.updated_at,
    }


def _row_to_reservation(row) -> Reservation:
    return Reservation(
        id=UUID(row.id),
        motel_id=UUID(row.motel_id),
        room_id=UUID(row.room_id),
        user_id=UUID(row.user_id),
        time_range=TimeRange(row.start_time, row.end_time),
        status=ReservationStatus(row.status),
        total_amount=Money(row.total_amount, row.currency),
        payment_id=UUID(row.payment_id) if row.payment_id else None,
        special_requests=row.special_requests,
        check_in_time=row.check_in_time,
        check_out_time=row.check_out_time,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ReservationRepoSQL(ReservationRepo):
    """
    Reservations table access.

    Writes that can make a reservation blocking lock the room row first and
    re-run the overlap query in the same transaction, so two writers for the
    same room serialize on that lock.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, reservation: Reservation) -> Reservation:
        await self._guard(reservation)
        await self._session.execute(
            insert(reservations).values(id=str(reservation.id), **_values(reservation))
        )
        return reservation

    async def update(self, reservation: Reservation) -> Reservation:
        await self._guard(reservation)
        result = await self._session.execute(
            update(reservations)
            .where(reservations.c.id == str(reservation.id))
            .values(**_values(reservation))
        )
        if result.rowcount == 0:
            raise NotFoundError("Reservation", reservation.id)
        return reservation

    async def get_by_id(self, reservation_id: UUID) -> Reservation | None:
        result = await self._session.execute(
            select(reservations).where(reservations.c.id == str(reservation_id))
        )
        row = result.first()
        return _row_to_reservation(row) if row else None

    async def find_overlapping(
        self,
        room_id: UUID,
        time_range: TimeRange,
        exclude_id: UUID | None = None,
    ) -> Sequence[Reservation]:
        stmt = self._overlap_query([room_id], time_range)
        if exclude_id is not None:
            stmt = stmt.where(reservations.c.id != str(exclude_id))
        result = await self._session.execute(stmt)
        return [_row_to_reservation(row) for row in result]

    async def list_by_rooms(
        self,
        room_ids: Sequence[UUID],
        time_range: TimeRange,
    ) -> Sequence[Reservation]:
        if not room_ids:
            return []
        result = await self._session.execute(self._overlap_query(room_ids, time_range))
        return [_row_to_reservation(row) for row in result]

    async def list_by_user(self, user_id: UUID) -> Sequence[Reservation]:
        return await self._list(reservations.c.user_id == str(user_id))

    async def list_by_motel(self, motel_id: UUID) -> Sequence[Reservation]:
        return await self._list(reservations.c.motel_id == str(motel_id))

    async def list_by_room(self, room_id: UUID) -> Sequence[Reservation]:
        return await self._list(reservations.c.room_id == str(room_id))

    async def list_by_status(self, status: ReservationStatus) -> Sequence[Reservation]:
        return await self._list(reservations.c.status == status.value)

    async def count_by_rooms(self, room_ids: Sequence[UUID]) -> int:
        if not room_ids:
            return 0
        stmt = select(func.count()).select_from(reservations).where(
            reservations.c.room_id.in_([str(room_id) for room_id in room_ids])
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _list(self, condition) -> list[Reservation]:
        stmt = select(reservations).where(condition).order_by(reservations.c.start_time)
        result = await self._session.execute(stmt)
        return [_row_to_reservation(row) for row in result]

    @staticmethod
    def _overlap_query(room_ids: Sequence[UUID], time_range: TimeRange):
        # Half-open: touching endpoints do not overlap.
        return select(reservations).where(
            reservations.c.room_id.in_([str(room_id) for room_id in room_ids]),
            reservations.c.status.in_(_BLOCKING),
            reservations.c.start_time < time_range.end,
            reservations.c.end_time > time_range.start,
        )

    async def _guard(self, reservation: Reservation) -> None:
        await self._session.execute(
            select(rooms.c.id).where(rooms.c.id == str(reservation.room_id)).with_for_update()
        )
        if not reservation.is_blocking:
            return
        conflicts = await self.find_overlapping(
            reservation.room_id, reservation.time_range, exclude_id=reservation.id
        )
        if conflicts:
            raise BookingConflictError(
                room_id=reservation.room_id,
                start=reservation.time_range.start,
                end=reservation.time_range.end,
                conflicting_reservation_id=conflicts[0].id,
            )
