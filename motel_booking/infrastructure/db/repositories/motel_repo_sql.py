from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from motel_booking.application.interfaces.motel_repo import MotelRepo
from motel_booking.domain.entities.motel import Motel
from motel_booking.domain.entities.room import Room, RoomType
from motel_booking.domain.value_objects.address import Address
from motel_booking.domain.value_objects.money import Money
from motel_booking.infrastructure.db.tables import motels, rooms


def _motel_values(motel: Motel) -> dict[str, Any]:
    return {
        "name": motel.name,
        "description": motel.description,
        "street": motel.address.street,
        "city": motel.address.city,
        "state": motel.address.state,
        "zip_code": motel.address.zip_code,
        "country": motel.address.country,
        "phone_number": motel.phone_number,
        "email": motel.email,
        "owner_id": str(motel.owner_id),
        "is_active": motel.is_active,
        "image_url": motel.image_url,
        "created_at": motel.created_at,
        "updated_at": motel.updated_at,
    }


def _row_to_motel(row) -> Motel:
    return Motel(
        id=UUID(row.id),
        name=row.name,
        description=row.description,
        address=Address(
            street=row.street,
            city=row.city,
            state=row.state,
            zip_code=row.zip_code,
            country=row.country,
        ),
        phone_number=row.phone_number,
        email=row.email,
        owner_id=UUID(row.owner_id),
        is_active=bool(row.is_active),
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _room_values(room: Room) -> dict[str, Any]:
    return {
        "motel_id": str(room.motel_id),
        "room_number": room.room_number,
        "name": room.name,
        "description": room.description,
        "room_type": room.room_type.value,
        "capacity": room.capacity,
        "price_per_hour": room.price_per_hour.amount,
        "currency": room.price_per_hour.currency,
        "is_available": room.is_available,
        "image_url": room.image_url,
        "created_at": room.created_at,
        "updated_at": room.updated_at,
    }


def _row_to_room(row) -> Room:
    return Room(
        id=UUID(row.id),
        motel_id=UUID(row.motel_id),
        room_number=row.room_number,
        name=row.name,
        description=row.description,
        room_type=RoomType(row.room_type),
        capacity=row.capacity,
        price_per_hour=Money(row.price_per_hour, row.currency),
        is_available=bool(row.is_available),
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class MotelRepoSQL(MotelRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_motel_by_id(self, motel_id: UUID) -> Motel | None:
        result = await self._session.execute(select(motels).where(motels.c.id == str(motel_id)))
        row = result.first()
        return _row_to_motel(row) if row else None

    async def list_motels(self, active_only: bool = False) -> Sequence[Motel]:
        stmt = select(motels).order_by(motels.c.name)
        if active_only:
            stmt = stmt.where(motels.c.is_active.is_(True))
        result = await self._session.execute(stmt)
        return [_row_to_motel(row) for row in result]

    async def add_motel(self, motel: Motel) -> Motel:
        await self._session.execute(insert(motels).values(id=str(motel.id), **_motel_values(motel)))
        return motel

    async def update_motel(self, motel: Motel) -> Motel:
        await self._session.execute(
            update(motels).where(motels.c.id == str(motel.id)).values(**_motel_values(motel))
        )
        return motel

    async def delete_motel(self, motel_id: UUID) -> None:
        # SQLite does not enforce ON DELETE CASCADE without a pragma.
        await self._session.execute(delete(rooms).where(rooms.c.motel_id == str(motel_id)))
        await self._session.execute(delete(motels).where(motels.c.id == str(motel_id)))

    async def get_room_by_id(self, room_id: UUID) -> Room | None:
        result = await self._session.execute(select(rooms).where(rooms.c.id == str(room_id)))
        row = result.first()
        return _row_to_room(row) if row else None

    async def get_room_within_motel(self, motel_id: UUID, room_id: UUID) -> Room | None:
        stmt = select(rooms).where(rooms.c.id == str(room_id), rooms.c.motel_id == str(motel_id))
        result = await self._session.execute(stmt)
        row = result.first()
        return _row_to_room(row) if row else None

    async def get_room_by_number(self, motel_id: UUID, room_number: str) -> Room | None:
        stmt = select(rooms).where(
            rooms.c.motel_id == str(motel_id), rooms.c.room_number == room_number
        )
        result = await self._session.execute(stmt)
        row = result.first()
        return _row_to_room(row) if row else None

    async def list_rooms(self, motel_id: UUID) -> Sequence[Room]:
        stmt = select(rooms).where(rooms.c.motel_id == str(motel_id)).order_by(rooms.c.room_number)
        result = await self._session.execute(stmt)
        return [_row_to_room(row) for row in result]

    async def add_room(self, room: Room) -> Room:
        await self._session.execute(insert(rooms).values(id=str(room.id), **_room_values(room)))
        return room

    async def update_room(self, room: Room) -> Room:
        await self._session.execute(
            update(rooms).where(rooms.c.id == str(room.id)).values(**_room_values(room))
        )
        return room

    async def delete_room(self, room_id: UUID) -> None:
        await self._session.execute(delete(rooms).where(rooms.c.id == str(room_id)))
