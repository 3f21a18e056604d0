from typing import Sequence
from uuid import UUID

from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.domain.entities.reservation import Reservation, ReservationStatus
from motel_booking.domain.errors import BookingConflictError, NotFoundError
from motel_booking.domain.value_objects.time_range import TimeRange
from motel_booking.infrastructure.in_memory._snapshot import snapshot


class InMemoryReservationRepo(ReservationRepo):
    """
    Dict-backed reservations.

    ``add`` and ``update`` never await between the overlap check and the
    write, so on a single event loop they are atomic.
    """

    def __init__(self) -> None:
        self.reservations: dict[UUID, Reservation] = {}

    async def add(self, reservation: Reservation) -> Reservation:
        self._ensure_no_conflict(reservation)
        self.reservations[reservation.id] = snapshot(reservation)
        return reservation

    async def update(self, reservation: Reservation) -> Reservation:
        if reservation.id not in self.reservations:
            raise NotFoundError("Reservation", reservation.id)
        self._ensure_no_conflict(reservation)
        self.reservations[reservation.id] = snapshot(reservation)
        return reservation

    async def get_by_id(self, reservation_id: UUID) -> Reservation | None:
        reservation = self.reservations.get(reservation_id)
        return snapshot(reservation) if reservation else None

    async def find_overlapping(
        self,
        room_id: UUID,
        time_range: TimeRange,
        exclude_id: UUID | None = None,
    ) -> Sequence[Reservation]:
        return [
            snapshot(r) for r in self._overlapping(room_id, time_range) if r.id != exclude_id
        ]

    async def list_by_rooms(
        self,
        room_ids: Sequence[UUID],
        time_range: TimeRange,
    ) -> Sequence[Reservation]:
        wanted = set(room_ids)
        return [
            snapshot(r)
            for r in self.reservations.values()
            if r.room_id in wanted and r.is_blocking and r.time_range.overlaps(time_range)
        ]

    async def list_by_user(self, user_id: UUID) -> Sequence[Reservation]:
        return self._select(lambda r: r.user_id == user_id)

    async def list_by_motel(self, motel_id: UUID) -> Sequence[Reservation]:
        return self._select(lambda r: r.motel_id == motel_id)

    async def list_by_room(self, room_id: UUID) -> Sequence[Reservation]:
        return self._select(lambda r: r.room_id == room_id)

    async def count_by_rooms(self, room_ids: Sequence[UUID]) -> int:
        wanted = set(room_ids)
        return sum(1 for r in self.reservations.values() if r.room_id in wanted)

    async def list_by_status(self, status: ReservationStatus) -> Sequence[Reservation]:
        return self._select(lambda r: r.status == status)

    def _select(self, predicate) -> list[Reservation]:
        found = [r for r in self.reservations.values() if predicate(r)]
        return [snapshot(r) for r in sorted(found, key=lambda r: r.time_range.start)]

    def _overlapping(self, room_id: UUID, time_range: TimeRange) -> list[Reservation]:
        return [r for r in self.reservations.values() if r.blocks(room_id, time_range)]

    def _ensure_no_conflict(self, reservation: Reservation) -> None:
        if not reservation.is_blocking:
            return
        for other in self._overlapping(reservation.room_id, reservation.time_range):
            if other.id != reservation.id:
                raise BookingConflictError(
                    room_id=reservation.room_id,
                    start=reservation.time_range.start,
                    end=reservation.time_range.end,
                    conflicting_reservation_id=other.id,
                )
