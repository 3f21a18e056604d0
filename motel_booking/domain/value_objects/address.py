"""Value Object Address."""

from dataclasses import dataclass, fields

from motel_booking.domain.errors import InvalidInputError


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    state: str
    zip_code: str
    country: str

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidInputError(item.name, "cannot be empty")
            object.__setattr__(self, item.name, value.strip())

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}, {self.country}"
