from motel_booking.domain.services.availability import (
    AvailableRooms,
    find_available,
    find_conflict,
    is_available,
)

__all__ = ["AvailableRooms", "find_available", "find_conflict", "is_available"]
