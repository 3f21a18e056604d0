from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from motel_booking.api.dependencies import get_use_cases
from motel_booking.api.schemas.motels import (
    AvailableRoomResponse,
    AvailableRoomsResponse,
    CreateMotelRequest,
    CreateRoomRequest,
    MotelResponse,
    RoomAvailabilityResponse,
    RoomAvailabilityUpdate,
    RoomResponse,
    UpdateMotelRequest,
    UpdateRoomRequest,
)
from motel_booking.config import Settings, get_settings

router = APIRouter()

UseCases = Annotated[dict, Depends(get_use_cases)]


@router.post("/motels", response_model=MotelResponse, status_code=status.HTTP_201_CREATED)
async def create_motel(payload: CreateMotelRequest, use_cases: UseCases) -> MotelResponse:
    motel = await use_cases["manage_motels"].create(
        name=payload.name,
        address=payload.address.to_value(),
        owner_id=payload.owner_id,
        description=payload.description,
        phone_number=payload.phone_number,
        email=payload.email or "",
        image_url=payload.image_url,
    )
    return MotelResponse.from_entity(motel)


@router.get("/motels", response_model=list[MotelResponse])
async def list_motels(
    use_cases: UseCases, active_only: bool = Query(default=False)
) -> list[MotelResponse]:
    motels = await use_cases["manage_motels"].list_motels(active_only=active_only)
    return [MotelResponse.from_entity(motel) for motel in motels]


@router.get("/motels/{motel_id}", response_model=MotelResponse)
async def get_motel(motel_id: UUID, use_cases: UseCases) -> MotelResponse:
    return MotelResponse.from_entity(await use_cases["manage_motels"].get(motel_id))


@router.patch("/motels/{motel_id}", response_model=MotelResponse)
async def update_motel(
    motel_id: UUID, payload: UpdateMotelRequest, use_cases: UseCases
) -> MotelResponse:
    changes = payload.model_dump(exclude_unset=True)
    if payload.address is not None:
        changes["address"] = payload.address.to_value()
    motel = await use_cases["manage_motels"].update(motel_id, **changes)
    return MotelResponse.from_entity(motel)


@router.delete("/motels/{motel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_motel(motel_id: UUID, use_cases: UseCases) -> Response:
    await use_cases["manage_motels"].delete(motel_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/motels/{motel_id}/availability", response_model=AvailableRoomsResponse)
async def find_available_rooms(
    motel_id: UUID,
    use_cases: UseCases,
    start_time: datetime = Query(...),
    end_time: datetime = Query(...),
    min_capacity: int | None = Query(default=None),
) -> AvailableRoomsResponse:
    priced = await use_cases["check_availability"].priced(
        motel_id=motel_id,
        start_time=start_time,
        end_time=end_time,
        min_capacity=min_capacity,
    )
    return AvailableRoomsResponse(
        motel_id=motel_id,
        start_time=start_time,
        end_time=end_time,
        rooms=[AvailableRoomResponse.priced(room, total) for room, total in priced],
    )


# === Rooms ===


@router.post(
    "/motels/{motel_id}/rooms",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_room(
    motel_id: UUID,
    payload: CreateRoomRequest,
    use_cases: UseCases,
    settings: Settings = Depends(get_settings),
) -> RoomResponse:
    room = await use_cases["manage_rooms"].add(
        motel_id=motel_id,
        room_number=payload.room_number,
        name=payload.name,
        capacity=payload.capacity,
        price_per_hour=payload.price_per_hour,
        currency=payload.currency or settings.default_currency,
        room_type=payload.room_type,
        description=payload.description,
        image_url=payload.image_url,
    )
    return RoomResponse.from_entity(room)


@router.get("/motels/{motel_id}/rooms", response_model=list[RoomResponse])
async def list_rooms(motel_id: UUID, use_cases: UseCases) -> list[RoomResponse]:
    rooms = await use_cases["manage_rooms"].list_rooms(motel_id)
    return [RoomResponse.from_entity(room) for room in rooms]


@router.get("/motels/{motel_id}/rooms/{room_id}", response_model=RoomResponse)
async def get_room(motel_id: UUID, room_id: UUID, use_cases: UseCases) -> RoomResponse:
    return RoomResponse.from_entity(await use_cases["manage_rooms"].get(motel_id, room_id))


@router.patch("/motels/{motel_id}/rooms/{room_id}", response_model=RoomResponse)
async def update_room(
    motel_id: UUID, room_id: UUID, payload: UpdateRoomRequest, use_cases: UseCases
) -> RoomResponse:
    room = await use_cases["manage_rooms"].update(
        motel_id, room_id, **payload.model_dump(exclude_unset=True)
    )
    return RoomResponse.from_entity(room)


@router.put("/motels/{motel_id}/rooms/{room_id}/availability", response_model=RoomResponse)
async def set_room_availability(
    motel_id: UUID, room_id: UUID, payload: RoomAvailabilityUpdate, use_cases: UseCases
) -> RoomResponse:
    room = await use_cases["manage_rooms"].set_availability(
        motel_id, room_id, payload.is_available
    )
    return RoomResponse.from_entity(room)


@router.get(
    "/motels/{motel_id}/rooms/{room_id}/availability",
    response_model=RoomAvailabilityResponse,
)
async def check_room_availability(
    motel_id: UUID,
    room_id: UUID,
    use_cases: UseCases,
    start_time: datetime = Query(...),
    end_time: datetime = Query(...),
) -> RoomAvailabilityResponse:
    available = await use_cases["check_availability"].check_room(
        motel_id=motel_id, room_id=room_id, start_time=start_time, end_time=end_time
    )
    return RoomAvailabilityResponse(
        room_id=room_id, start_time=start_time, end_time=end_time, available=available
    )


@router.delete("/motels/{motel_id}/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(motel_id: UUID, room_id: UUID, use_cases: UseCases) -> Response:
    await use_cases["manage_rooms"].delete(motel_id, room_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
