import logging
from datetime import datetime, timedelta
from uuid import UUID

from motel_booking.application.interfaces.clock import Clock
from motel_booking.application.interfaces.event_publisher import EventPublisher
from motel_booking.application.interfaces.motel_repo import MotelRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager
from motel_booking.domain.entities.reservation import Reservation
from motel_booking.domain.errors import BookingConflictError, NotFoundError, RoomUnavailableError
from motel_booking.domain.value_objects.time_range import DEFAULT_CLOCK_SKEW, TimeRange


class CreateReservationUseCase:
    def __init__(
        self,
        motel_repo: MotelRepo,
        reservation_repo: ReservationRepo,
        event_publisher: EventPublisher,
        transaction_manager: TransactionManager,
        clock: Clock,
        clock_skew: timedelta = DEFAULT_CLOCK_SKEW,
    ) -> None:
        self._motel_repo = motel_repo
        self._reservation_repo = reservation_repo
        self._event_publisher = event_publisher
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._clock_skew = clock_skew
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        motel_id: UUID,
        room_id: UUID,
        user_id: UUID,
        start_time: datetime,
        end_time: datetime,
        special_requests: str | None = None,
    ) -> Reservation:
        now = self._clock.now()
        async with self._transaction_manager.start():
            motel = await self._motel_repo.get_motel_by_id(motel_id)
            if motel is None:
                raise NotFoundError("Motel", motel_id)

            room = await self._motel_repo.get_room_within_motel(motel_id, room_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            if not room.is_available:
                raise RoomUnavailableError(room.id)

            time_range = TimeRange.for_booking(start_time, end_time, now, self._clock_skew)

            conflicts = await self._reservation_repo.find_overlapping(room.id, time_range)
            if conflicts:
                raise BookingConflictError(
                    room_id=room.id,
                    start=time_range.start,
                    end=time_range.end,
                    conflicting_reservation_id=conflicts[0].id,
                )

            reservation = Reservation.create(
                motel_id=motel.id,
                room=room,
                user_id=user_id,
                time_range=time_range,
                now=now,
                special_requests=special_requests,
            )
            await self._reservation_repo.add(reservation)
            await self._event_publisher.publish(reservation.pull_events())

        self._logger.info(
            "Reservation created",
            extra={
                "reservation_id": str(reservation.id),
                "room_id": str(room.id),
                "total_amount": str(reservation.total_amount),
            },
        )
        return reservation
