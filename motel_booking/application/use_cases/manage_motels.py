"""Motel and room administration."""

import logging
from decimal import Decimal
from typing import Any, Sequence
from uuid import UUID

from motel_booking.application.interfaces.clock import Clock
from motel_booking.application.interfaces.motel_repo import MotelRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager
from motel_booking.domain.entities.motel import Motel
from motel_booking.domain.entities.room import Room, RoomType
from motel_booking.domain.errors import BusinessRuleViolationError, NotFoundError
from motel_booking.domain.value_objects.address import Address
from motel_booking.domain.value_objects.money import Money


class ManageMotelsUseCase:
    def __init__(
        self,
        motel_repo: MotelRepo,
        reservation_repo: ReservationRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._motel_repo = motel_repo
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def create(
        self,
        name: str,
        address: Address,
        owner_id: UUID,
        description: str = "",
        phone_number: str = "",
        email: str = "",
        image_url: str | None = None,
    ) -> Motel:
        now = self._clock.now()
        motel = Motel(
            name=name,
            address=address,
            owner_id=owner_id,
            description=description,
            phone_number=phone_number,
            email=email,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        async with self._transaction_manager.start():
            await self._motel_repo.add_motel(motel)
        self._logger.info("Motel created", extra={"motel_id": str(motel.id)})
        return motel

    async def list_motels(self, active_only: bool = False) -> Sequence[Motel]:
        return await self._motel_repo.list_motels(active_only=active_only)

    async def get(self, motel_id: UUID) -> Motel:
        motel = await self._motel_repo.get_motel_by_id(motel_id)
        if motel is None:
            raise NotFoundError("Motel", motel_id)
        return motel

    async def update(self, motel_id: UUID, **changes: Any) -> Motel:
        async with self._transaction_manager.start():
            motel = await self.get(motel_id)
            motel.update_details(
                name=_pick(changes, "name", motel.name),
                description=_pick(changes, "description", motel.description),
                address=_pick(changes, "address", motel.address),
                phone_number=_pick(changes, "phone_number", motel.phone_number),
                email=_pick(changes, "email", motel.email),
                now=self._clock.now(),
            )
            if changes.get("is_active") is not None:
                motel.is_active = changes["is_active"]
            if "image_url" in changes:
                motel.image_url = changes["image_url"]
            await self._motel_repo.update_motel(motel)
        return motel

    async def delete(self, motel_id: UUID) -> None:
        async with self._transaction_manager.start():
            motel = await self.get(motel_id)
            rooms = await self._motel_repo.list_rooms(motel.id)
            if rooms and await self._reservation_repo.count_by_rooms([room.id for room in rooms]):
                raise BusinessRuleViolationError(
                    rule="MOTEL_HAS_RESERVATIONS",
                    message=f"Motel {motel.id} has rooms with reservations and cannot be deleted",
                )
            await self._motel_repo.delete_motel(motel.id)
        self._logger.info(
            "Motel deleted", extra={"motel_id": str(motel_id), "rooms_deleted": len(rooms)}
        )


class ManageRoomsUseCase:
    def __init__(
        self,
        motel_repo: MotelRepo,
        reservation_repo: ReservationRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._motel_repo = motel_repo
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def add(
        self,
        motel_id: UUID,
        room_number: str,
        name: str,
        capacity: int,
        price_per_hour: Decimal,
        currency: str,
        room_type: RoomType = RoomType.STANDARD,
        description: str = "",
        image_url: str | None = None,
    ) -> Room:
        now = self._clock.now()
        room = Room(
            motel_id=motel_id,
            room_number=room_number,
            name=name,
            capacity=capacity,
            price_per_hour=Money(price_per_hour, currency),
            room_type=room_type,
            description=description,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        async with self._transaction_manager.start():
            motel = await self._motel_repo.get_motel_by_id(motel_id)
            if motel is None:
                raise NotFoundError("Motel", motel_id)
            if await self._motel_repo.get_room_by_number(motel.id, room.room_number):
                raise BusinessRuleViolationError(
                    rule="UNIQUE_ROOM_NUMBER",
                    message=f"Room number '{room.room_number}' already exists in motel {motel.id}",
                )
            await self._motel_repo.add_room(room)
        self._logger.info(
            "Room added", extra={"motel_id": str(motel_id), "room_id": str(room.id)}
        )
        return room

    async def list_rooms(self, motel_id: UUID) -> Sequence[Room]:
        motel = await self._motel_repo.get_motel_by_id(motel_id)
        if motel is None:
            raise NotFoundError("Motel", motel_id)
        return await self._motel_repo.list_rooms(motel.id)

    async def get(self, motel_id: UUID, room_id: UUID) -> Room:
        room = await self._motel_repo.get_room_within_motel(motel_id, room_id)
        if room is None:
            raise NotFoundError("Room", room_id)
        return room

    async def update(self, motel_id: UUID, room_id: UUID, **changes: Any) -> Room:
        async with self._transaction_manager.start():
            room = await self.get(motel_id, room_id)
            price = room.price_per_hour
            if changes.get("price_per_hour") is not None or changes.get("currency") is not None:
                price = Money(
                    _pick(changes, "price_per_hour", price.amount),
                    _pick(changes, "currency", price.currency),
                )
            room.update_details(
                name=_pick(changes, "name", room.name),
                description=_pick(changes, "description", room.description),
                capacity=_pick(changes, "capacity", room.capacity),
                price_per_hour=price,
                now=self._clock.now(),
            )
            if changes.get("room_type") is not None:
                room.room_type = RoomType(changes["room_type"])
            if "image_url" in changes:
                room.image_url = changes["image_url"]
            await self._motel_repo.update_room(room)
        return room

    async def set_availability(self, motel_id: UUID, room_id: UUID, is_available: bool) -> Room:
        async with self._transaction_manager.start():
            room = await self.get(motel_id, room_id)
            room.set_availability(is_available, self._clock.now())
            await self._motel_repo.update_room(room)
        self._logger.info(
            "Room availability changed",
            extra={"room_id": str(room_id), "is_available": is_available},
        )
        return room

    async def delete(self, motel_id: UUID, room_id: UUID) -> None:
        async with self._transaction_manager.start():
            room = await self.get(motel_id, room_id)
            if await self._reservation_repo.count_by_rooms([room.id]):
                raise BusinessRuleViolationError(
                    rule="ROOM_HAS_RESERVATIONS",
                    message=f"Room {room.id} has reservations and cannot be deleted",
                )
            await self._motel_repo.delete_room(room.id)


def _pick(changes: dict[str, Any], key: str, current: Any) -> Any:
    value = changes.get(key)
    return current if value is None else value
