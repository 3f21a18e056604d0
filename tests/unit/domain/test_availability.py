from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

from motel_booking.domain.entities.reservation import Reservation, ReservationStatus
from motel_booking.domain.entities.room import Room
from motel_booking.domain.services.availability import find_available, is_available
from motel_booking.domain.value_objects.money import Money
from motel_booking.domain.value_objects.time_range import TimeRange

BASE = datetime(2030, 1, 1, 10, tzinfo=timezone.utc)
MOTEL_ID = uuid4()


def _room(number: str, capacity: int = 2, available: bool = True) -> Room:
    return Room(
        motel_id=MOTEL_ID,
        room_number=number,
        name=f"Room {number}",
        capacity=capacity,
        price_per_hour=Money(Decimal("50"), "USD"),
        is_available=available,
    )


def _window(start_hour: int, end_hour: int) -> TimeRange:
    return TimeRange(BASE.replace(hour=start_hour), BASE.replace(hour=end_hour))


def _booking(room: Room, window: TimeRange, status: ReservationStatus) -> Reservation:
    reservation = Reservation.create(MOTEL_ID, room, uuid4(), window, BASE - timedelta(days=1))
    reservation.status = status
    return reservation


def test_free_room_is_available():
    room = _room("1")
    assert is_available(room, _window(10, 12), [])


def test_confirmed_overlap_blocks():
    room = _room("1")
    booked = _booking(room, _window(10, 12), ReservationStatus.CONFIRMED)
    assert not is_available(room, _window(11, 13), [booked])


def test_touching_window_is_free():
    room = _room("1")
    booked = _booking(room, _window(10, 12), ReservationStatus.CHECKED_IN)
    assert is_available(room, _window(12, 14), [booked])


def test_pending_and_cancelled_do_not_block():
    room = _room("1")
    pending = _booking(room, _window(10, 12), ReservationStatus.PENDING)
    cancelled = _booking(room, _window(10, 12), ReservationStatus.CANCELLED)
    assert is_available(room, _window(10, 12), [pending, cancelled])


def test_reservation_on_other_room_is_ignored():
    room, other = _room("1"), _room("2")
    booked = _booking(other, _window(10, 12), ReservationStatus.CONFIRMED)
    assert is_available(room, _window(10, 12), [booked])


def test_administratively_unavailable_room():
    assert not is_available(_room("1", available=False), _window(10, 12), [])


def test_find_available_filters_and_is_restartable():
    small, big, closed, busy = _room("1", 2), _room("2", 4), _room("3", 4, False), _room("4", 6)
    booked = _booking(busy, _window(9, 11), ReservationStatus.CONFIRMED)

    result = find_available([small, big, closed, busy], _window(10, 12), [booked], min_capacity=3)

    assert [room.room_number for room in result] == ["2"]
    assert [room.room_number for room in result] == ["2"]
    assert bool(result)


def test_find_available_without_capacity_filter():
    rooms = [_room("1"), _room("2")]
    result = find_available(rooms, _window(10, 12), [])
    assert {room.room_number for room in result} == {"1", "2"}
