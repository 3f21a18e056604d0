from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from motel_booking.domain.entities.reservation import ReservationStatus
from motel_booking.domain.errors import (
    BookingConflictError,
    ErrorKind,
    InvalidTimeRangeError,
    NotFoundError,
    RoomUnavailableError,
)
from motel_booking.domain.events import ReservationCreated
from motel_booking.domain.value_objects.money import Money


async def _book(use_cases, motel, room, start, end, user_id=None):
    return await use_cases["create_reservation"].execute(
        motel_id=motel.id,
        room_id=room.id,
        user_id=user_id or uuid4(),
        start_time=start,
        end_time=end,
    )


class TestCreateReservation:
    @pytest.mark.asyncio
    async def test_two_hours_at_fifty_is_pending_hundred(self, use_cases, motel, room, publisher, at):
        reservation = await _book(use_cases, motel, room, at(10), at(12))

        assert reservation.status == ReservationStatus.PENDING
        assert reservation.total_amount == Money(Decimal("100.00"), "USD")
        assert [type(e) for e in publisher.events] == [ReservationCreated]

    @pytest.mark.asyncio
    async def test_conflict_with_confirmed_reservation(self, use_cases, motel, room, reservation_repo, at):
        first = await _book(use_cases, motel, room, at(10), at(12))
        await use_cases["confirm_reservation"].execute(first.id)

        with pytest.raises(BookingConflictError) as exc_info:
            await _book(use_cases, motel, room, at(11), at(13))

        assert exc_info.value.kind == ErrorKind.BOOKING_CONFLICT
        assert exc_info.value.conflicting_reservation_id == first.id
        assert str(first.id) in exc_info.value.message
        assert len(reservation_repo.reservations) == 1

    @pytest.mark.asyncio
    async def test_touching_windows_do_not_conflict(self, use_cases, motel, room, at):
        first = await _book(use_cases, motel, room, at(10), at(12))
        await use_cases["confirm_reservation"].execute(first.id)

        second = await _book(use_cases, motel, room, at(12), at(14))

        assert second.status == ReservationStatus.PENDING

    @pytest.mark.asyncio
    async def test_pending_reservations_do_not_block(self, use_cases, motel, room, at):
        await _book(use_cases, motel, room, at(10), at(12))
        second = await _book(use_cases, motel, room, at(10), at(12))
        assert second.status == ReservationStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_motel(self, use_cases, room, at):
        with pytest.raises(NotFoundError):
            await use_cases["create_reservation"].execute(
                motel_id=uuid4(), room_id=room.id, user_id=uuid4(), start_time=at(10), end_time=at(12)
            )

    @pytest.mark.asyncio
    async def test_room_must_belong_to_motel(self, use_cases, motel, room, at):
        other = await use_cases["manage_motels"].create(
            name="Other", address=motel.address, owner_id=uuid4()
        )
        with pytest.raises(NotFoundError) as exc_info:
            await _book(use_cases, other, room, at(10), at(12))
        assert exc_info.value.entity == "Room"

    @pytest.mark.asyncio
    async def test_administratively_unavailable_room(self, use_cases, motel, room, at):
        await use_cases["manage_rooms"].set_availability(motel.id, room.id, False)
        with pytest.raises(RoomUnavailableError):
            await _book(use_cases, motel, room, at(10), at(12))

    @pytest.mark.asyncio
    async def test_past_start_rejected(self, use_cases, motel, room, at):
        with pytest.raises(InvalidTimeRangeError):
            await _book(use_cases, motel, room, at(7), at(9))

    @pytest.mark.asyncio
    async def test_start_within_clock_skew_accepted(self, use_cases, motel, room, at):
        reservation = await _book(use_cases, motel, room, at(7, 57), at(9, 57))
        assert reservation.total_amount.amount == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_inverted_window_rejected(self, use_cases, motel, room, at):
        with pytest.raises(InvalidTimeRangeError):
            await _book(use_cases, motel, room, at(12), at(10))

    @pytest.mark.asyncio
    async def test_fractional_hours_are_prorated(self, use_cases, motel, room, at):
        reservation = await _book(use_cases, motel, room, at(10), at(10) + timedelta(minutes=90))
        assert reservation.total_amount.amount == Decimal("75.00")
