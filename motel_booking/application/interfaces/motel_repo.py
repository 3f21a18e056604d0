from typing import Sequence
from uuid import UUID

from motel_booking.domain.entities.motel import Motel
from motel_booking.domain.entities.room import Room


class MotelRepo:
    """Motel and room directory. Rooms are owned by their motel."""

    async def get_motel_by_id(self, motel_id: UUID) -> Motel | None:
        raise NotImplementedError

    async def list_motels(self, active_only: bool = False) -> Sequence[Motel]:
        raise NotImplementedError

    async def add_motel(self, motel: Motel) -> Motel:
        raise NotImplementedError

    async def update_motel(self, motel: Motel) -> Motel:
        raise NotImplementedError

    async def delete_motel(self, motel_id: UUID) -> None:
        """Remove the motel and cascade to its rooms."""
        raise NotImplementedError

    async def get_room_by_id(self, room_id: UUID) -> Room | None:
        raise NotImplementedError

    async def get_room_within_motel(self, motel_id: UUID, room_id: UUID) -> Room | None:
        raise NotImplementedError

    async def get_room_by_number(self, motel_id: UUID, room_number: str) -> Room | None:
        raise NotImplementedError

    async def list_rooms(self, motel_id: UUID) -> Sequence[Room]:
        raise NotImplementedError

    async def add_room(self, room: Room) -> Room:
        raise NotImplementedError

    async def update_room(self, room: Room) -> Room:
        raise NotImplementedError

    async def delete_room(self, room_id: UUID) -> None:
        raise NotImplementedError
