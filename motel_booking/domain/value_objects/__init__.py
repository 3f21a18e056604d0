"""Value Objects of the reservation domain."""

from motel_booking.domain.value_objects.address import Address
from motel_booking.domain.value_objects.money import Money
from motel_booking.domain.value_objects.time_range import TimeRange

__all__ = [
    "Address",
    "Money",
    "TimeRange",
]
