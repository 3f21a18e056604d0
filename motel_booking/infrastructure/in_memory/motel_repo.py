from typing import Sequence
from uuid import UUID

from motel_booking.application.interfaces.motel_repo import MotelRepo
from motel_booking.domain.entities.motel import Motel
from motel_booking.domain.entities.room import Room
from motel_booking.domain.errors import NotFoundError
from motel_booking.infrastructure.in_memory._snapshot import snapshot


class InMemoryMotelRepo(MotelRepo):
    def __init__(self) -> None:
        self.motels: dict[UUID, Motel] = {}
        self.rooms: dict[UUID, Room] = {}

    async def get_motel_by_id(self, motel_id: UUID) -> Motel | None:
        motel = self.motels.get(motel_id)
        return snapshot(motel) if motel else None

    async def list_motels(self, active_only: bool = False) -> Sequence[Motel]:
        return [
            snapshot(motel)
            for motel in sorted(self.motels.values(), key=lambda m: m.name)
            if motel.is_active or not active_only
        ]

    async def add_motel(self, motel: Motel) -> Motel:
        self.motels[motel.id] = snapshot(motel)
        return motel

    async def update_motel(self, motel: Motel) -> Motel:
        if motel.id not in self.motels:
            raise NotFoundError("Motel", motel.id)
        self.motels[motel.id] = snapshot(motel)
        return motel

    async def delete_motel(self, motel_id: UUID) -> None:
        self.motels.pop(motel_id, None)
        for room_id in [r.id for r in self.rooms.values() if r.motel_id == motel_id]:
            del self.rooms[room_id]

    async def get_room_by_id(self, room_id: UUID) -> Room | None:
        room = self.rooms.get(room_id)
        return snapshot(room) if room else None

    async def get_room_within_motel(self, motel_id: UUID, room_id: UUID) -> Room | None:
        room = self.rooms.get(room_id)
        if room is None or room.motel_id != motel_id:
            return None
        return snapshot(room)

    async def get_room_by_number(self, motel_id: UUID, room_number: str) -> Room | None:
        for room in self.rooms.values():
            if room.motel_id == motel_id and room.room_number == room_number:
                return snapshot(room)
        return None

    async def list_rooms(self, motel_id: UUID) -> Sequence[Room]:
        rooms = [room for room in self.rooms.values() if room.motel_id == motel_id]
        return [snapshot(room) for room in sorted(rooms, key=lambda r: r.room_number)]

    async def add_room(self, room: Room) -> Room:
        self.rooms[room.id] = snapshot(room)
        return room

    async def update_room(self, room: Room) -> Room:
        if room.id not in self.rooms:
            raise NotFoundError("Room", room.id)
        self.rooms[room.id] = snapshot(room)
        return room

    async def delete_room(self, room_id: UUID) -> None:
        self.rooms.pop(room_id, None)
