from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, condecimal, constr

from motel_booking.domain.entities.motel import Motel
from motel_booking.domain.entities.room import Room, RoomType
from motel_booking.domain.value_objects.address import Address
from motel_booking.domain.value_objects.money import Money

Amount = condecimal(max_digits=12, decimal_places=2, ge=0)
CurrencyCode = constr(strip_whitespace=True, min_length=3, max_length=3)


class AddressSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    street: constr(strip_whitespace=True, min_length=1, max_length=255)
    city: constr(strip_whitespace=True, min_length=1, max_length=100)
    state: constr(strip_whitespace=True, min_length=1, max_length=100)
    zip_code: constr(strip_whitespace=True, min_length=1, max_length=20)
    country: constr(strip_whitespace=True, min_length=1, max_length=100)

    def to_value(self) -> Address:
        return Address(**self.model_dump())

    @classmethod
    def from_value(cls, address: Address) -> "AddressSchema":
        return cls(
            street=address.street,
            city=address.city,
            state=address.state,
            zip_code=address.zip_code,
            country=address.country,
        )


class CreateMotelRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(strip_whitespace=True, min_length=1, max_length=200)
    address: AddressSchema
    owner_id: UUID
    description: str = Field(default="", max_length=2000)
    phone_number: str = Field(default="", max_length=50)
    email: EmailStr | None = None
    image_url: str | None = Field(default=None, max_length=500)


class UpdateMotelRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(strip_whitespace=True, min_length=1, max_length=200) | None = None
    address: AddressSchema | None = None
    description: str | None = Field(default=None, max_length=2000)
    phone_number: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    is_active: bool | None = None
    image_url: str | None = Field(default=None, max_length=500)


class MotelResponse(BaseModel):
    id: UUID
    name: str
    description: str
    address: AddressSchema
    phone_number: str
    email: str
    owner_id: UUID
    is_active: bool
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, motel: Motel) -> "MotelResponse":
        return cls(
            id=motel.id,
            name=motel.name,
            description=motel.description,
            address=AddressSchema.from_value(motel.address),
            phone_number=motel.phone_number,
            email=motel.email,
            owner_id=motel.owner_id,
            is_active=motel.is_active,
            image_url=motel.image_url,
            created_at=motel.created_at,
            updated_at=motel.updated_at,
        )


class CreateRoomRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    room_number: constr(strip_whitespace=True, min_length=1, max_length=20)
    name: constr(strip_whitespace=True, min_length=1, max_length=200)
    capacity: int = Field(gt=0)
    price_per_hour: Amount
    currency: CurrencyCode | None = None
    room_type: RoomType = RoomType.STANDARD
    description: str = Field(default="", max_length=2000)
    image_url: str | None = Field(default=None, max_length=500)


class UpdateRoomRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(strip_whitespace=True, min_length=1, max_length=200) | None = None
    capacity: int | None = Field(default=None, gt=0)
    price_per_hour: Amount | None = None
    currency: CurrencyCode | None = None
    room_type: RoomType | None = None
    description: str | None = Field(default=None, max_length=2000)
    image_url: str | None = Field(default=None, max_length=500)


class RoomAvailabilityUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_available: bool


class RoomResponse(BaseModel):
    id: UUID
    motel_id: UUID
    room_number: str
    name: str
    description: str
    room_type: RoomType
    capacity: int
    price_per_hour: Decimal
    currency: str
    is_available: bool
    image_url: str | None = None

    @classmethod
    def from_entity(cls, room: Room) -> "RoomResponse":
        return cls(
            id=room.id,
            motel_id=room.motel_id,
            room_number=room.room_number,
            name=room.name,
            description=room.description,
            room_type=room.room_type,
            capacity=room.capacity,
            price_per_hour=room.price_per_hour.amount,
            currency=room.price_per_hour.currency,
            is_available=room.is_available,
            image_url=room.image_url,
        )


class AvailableRoomResponse(RoomResponse):
    total_price: Decimal

    @classmethod
    def priced(cls, room: Room, total: Money) -> "AvailableRoomResponse":
        return cls(**RoomResponse.from_entity(room).model_dump(), total_price=total.amount)


class AvailableRoomsResponse(BaseModel):
    motel_id: UUID
    start_time: datetime
    end_time: datetime
    rooms: list[AvailableRoomResponse]


class RoomAvailabilityResponse(BaseModel):
    room_id: UUID
    start_time: datetime
    end_time: datetime
    available: bool
