"""Room availability engine.

Pure functions over a snapshot of rooms and reservations. A room is free for a
window when it is administratively available and no blocking reservation on
that room overlaps the window.
"""

from collections.abc import Iterable, Iterator, Sequence

from motel_booking.domain.entities.reservation import Reservation
from motel_booking.domain.entities.room import Room
from motel_booking.domain.value_objects.time_range import TimeRange


def find_conflict(
    room: Room,
    time_range: TimeRange,
    reservations: Iterable[Reservation],
    exclude_id=None,
) -> Reservation | None:
    """First blocking reservation on ``room`` overlapping ``time_range``, if any."""
    for reservation in reservations:
        if exclude_id is not None and reservation.id == exclude_id:
            continue
        if reservation.blocks(room.id, time_range):
            return reservation
    return None


def is_available(room: Room, time_range: TimeRange, reservations: Iterable[Reservation]) -> bool:
    if not room.is_available:
        return False
    return find_conflict(room, time_range, reservations) is None


class AvailableRooms:
    """
    Lazy view of the rooms free for a window.

    Each iteration re-evaluates the snapshot it was built from, so the result
    can be walked more than once.
    """

    def __init__(
        self,
        rooms: Sequence[Room],
        time_range: TimeRange,
        reservations: Sequence[Reservation],
        min_capacity: int | None = None,
    ):
        self._rooms = tuple(rooms)
        self._time_range = time_range
        self._reservations = tuple(reservations)
        self._min_capacity = min_capacity

    def __iter__(self) -> Iterator[Room]:
        for room in self._rooms:
            if not room.is_available:
                continue
            if self._min_capacity is not None and room.capacity < self._min_capacity:
                continue
            if find_conflict(room, self._time_range, self._reservations) is None:
                yield room

    def __bool__(self) -> bool:
        return next(iter(self), None) is not None

    def __repr__(self) -> str:
        return f"AvailableRooms(time_range={self._time_range}, min_capacity={self._min_capacity})"


def find_available(
    rooms: Sequence[Room],
    time_range: TimeRange,
    reservations: Sequence[Reservation],
    min_capacity: int | None = None,
) -> AvailableRooms:
    return AvailableRooms(rooms, time_range, reservations, min_capacity)
