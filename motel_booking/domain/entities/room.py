"""Room entity - a bookable unit within a motel."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from motel_booking.domain.errors import InvalidInputError
from motel_booking.domain.value_objects.money import Money


class RoomType(str, Enum):
    STANDARD = "STANDARD"
    DELUXE = "DELUXE"
    SUITE = "SUITE"
    PREMIUM = "PREMIUM"


@dataclass
class Room:
    """
    Room with hourly pricing and capacity.

    ``is_available`` is an administrative flag; booking state lives in the
    reservations that reference the room by id.
    """

    motel_id: UUID
    room_number: str
    name: str
    capacity: int
    price_per_hour: Money
    room_type: RoomType = RoomType.STANDARD
    description: str = ""
    is_available: bool = True
    image_url: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.room_number = _required("room_number", self.room_number)
        self.name = _required("name", self.name)
        _validate_capacity(self.capacity)

    def update_details(
        self,
        name: str,
        description: str,
        capacity: int,
        price_per_hour: Money,
        now: datetime,
    ) -> None:
        name = _required("name", name)
        _validate_capacity(capacity)
        self.name = name
        self.description = description
        self.capacity = capacity
        self.price_per_hour = price_per_hour
        self.updated_at = now

    def set_availability(self, is_available: bool, now: datetime) -> None:
        self.is_available = is_available
        self.updated_at = now


def _required(field_name: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(field_name, "cannot be empty")
    return value.strip()


def _validate_capacity(capacity: int) -> None:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise InvalidInputError("capacity", "must be greater than zero")
