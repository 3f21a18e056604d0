from typing import Sequence
from uuid import UUID

from motel_booking.domain.entities.reservation import Reservation, ReservationStatus
from motel_booking.domain.value_objects.time_range import TimeRange


class ReservationRepo:
    async def add(self, reservation: Reservation) -> Reservation:
        """
        Persist a new reservation.

        Raises ``BookingConflictError`` when the reservation is blocking and
        another blocking reservation overlaps it on the same room. The check
        and the write happen atomically with respect to other writers.
        """
        raise NotImplementedError

    async def update(self, reservation: Reservation) -> Reservation:
        """Persist changes; moving into a blocking status re-checks overlap like ``add``."""
        raise NotImplementedError

    async def get_by_id(self, reservation_id: UUID) -> Reservation | None:
        raise NotImplementedError

    async def find_overlapping(
        self,
        room_id: UUID,
        time_range: TimeRange,
        exclude_id: UUID | None = None,
    ) -> Sequence[Reservation]:
        """Blocking reservations on the room whose window overlaps ``time_range``."""
        raise NotImplementedError

    async def list_by_rooms(
        self,
        room_ids: Sequence[UUID],
        time_range: TimeRange,
    ) -> Sequence[Reservation]:
        """Blocking reservations overlapping the window on any of the rooms."""
        raise NotImplementedError

    async def list_by_user(self, user_id: UUID) -> Sequence[Reservation]:
        raise NotImplementedError

    async def list_by_motel(self, motel_id: UUID) -> Sequence[Reservation]:
        raise NotImplementedError

    async def list_by_room(self, room_id: UUID) -> Sequence[Reservation]:
        raise NotImplementedError

    async def count_by_rooms(self, room_ids: Sequence[UUID]) -> int:
        raise NotImplementedError

    async def list_by_status(self, status: ReservationStatus) -> Sequence[Reservation]:
        raise NotImplementedError
