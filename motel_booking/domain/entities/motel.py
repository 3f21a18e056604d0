"""Motel entity - the bookable property that owns its rooms."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from motel_booking.domain.errors import InvalidInputError
from motel_booking.domain.value_objects.address import Address


@dataclass
class Motel:
    name: str
    address: Address
    owner_id: UUID
    description: str = ""
    phone_number: str = ""
    email: str = ""
    is_active: bool = True
    image_url: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidInputError("name", "cannot be empty")
        self.name = self.name.strip()

    def update_details(
        self,
        name: str,
        description: str,
        address: Address,
        phone_number: str,
        email: str,
        now: datetime,
    ) -> None:
        if not name or not name.strip():
            raise InvalidInputError("name", "cannot be empty")
        self.name = name.strip()
        self.description = description
        self.address = address
        self.phone_number = phone_number
        self.email = email
        self.updated_at = now
