from datetime import datetime
from uuid import UUID

from motel_booking.application.interfaces.motel_repo import MotelRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.domain.entities.reservation import calculate_total_amount
from motel_booking.domain.entities.room import Room
from motel_booking.domain.errors import InvalidInputError, NotFoundError
from motel_booking.domain.services.availability import find_available, is_available
from motel_booking.domain.value_objects.money import Money
from motel_booking.domain.value_objects.time_range import TimeRange


class CheckAvailabilityUseCase:
    def __init__(self, motel_repo: MotelRepo, reservation_repo: ReservationRepo) -> None:
        self._motel_repo = motel_repo
        self._reservation_repo = reservation_repo

    async def execute(
        self,
        motel_id: UUID,
        start_time: datetime,
        end_time: datetime,
        min_capacity: int | None = None,
    ) -> list[Room]:
        """Rooms of the motel free for the whole window."""
        if min_capacity is not None and min_capacity <= 0:
            raise InvalidInputError("min_capacity", "must be greater than zero")
        motel = await self._motel_repo.get_motel_by_id(motel_id)
        if motel is None:
            raise NotFoundError("Motel", motel_id)
        time_range = TimeRange(start_time, end_time)
        rooms = await self._motel_repo.list_rooms(motel.id)
        reservations = await self._reservation_repo.list_by_rooms(
            [room.id for room in rooms], time_range
        )
        return list(find_available(rooms, time_range, reservations, min_capacity))

    async def priced(
        self,
        motel_id: UUID,
        start_time: datetime,
        end_time: datetime,
        min_capacity: int | None = None,
    ) -> list[tuple[Room, Money]]:
        """Available rooms with what the whole window would cost in each."""
        rooms = await self.execute(motel_id, start_time, end_time, min_capacity)
        time_range = TimeRange(start_time, end_time)
        return [(room, calculate_total_amount(room, time_range)) for room in rooms]

    async def check_room(
        self,
        motel_id: UUID,
        room_id: UUID,
        start_time: datetime,
        end_time: datetime,
    ) -> bool:
        room = await self._motel_repo.get_room_within_motel(motel_id, room_id)
        if room is None:
            raise NotFoundError("Room", room_id)
        time_range = TimeRange(start_time, end_time)
        reservations = await self._reservation_repo.find_overlapping(room.id, time_range)
        return is_available(room, time_range, reservations)
