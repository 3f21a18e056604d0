from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from motel_booking.api.dependencies import get_use_cases
from motel_booking.api.schemas.reservations import CreateReservationRequest, ReservationResponse
from motel_booking.infrastructure.db.retry import retry_on_deadlock

router = APIRouter()

UseCases = Annotated[dict, Depends(get_use_cases)]


@router.post(
    "/reservations",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    payload: CreateReservationRequest, use_cases: UseCases
) -> ReservationResponse:
    """Book a room; concurrent bookings of the same room are retried on deadlock."""

    async def book():
        return await use_cases["create_reservation"].execute(
            motel_id=payload.motel_id,
            room_id=payload.room_id,
            user_id=payload.user_id,
            start_time=payload.start_time,
            end_time=payload.end_time,
            special_requests=payload.special_requests,
        )

    reservation = await retry_on_deadlock(book, max_attempts=3, base_delay=0.1)
    return ReservationResponse.from_entity(reservation)


@router.get("/reservations", response_model=list[ReservationResponse])
async def list_reservations(
    use_cases: UseCases, user_id: UUID = Query(...)
) -> list[ReservationResponse]:
    reservations = await use_cases["reservation_queries"].by_user(user_id)
    return [ReservationResponse.from_entity(r) for r in reservations]


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(reservation_id: UUID, use_cases: UseCases) -> ReservationResponse:
    reservation = await use_cases["reservation_queries"].get(reservation_id)
    return ReservationResponse.from_entity(reservation)


@router.get("/motels/{motel_id}/reservations", response_model=list[ReservationResponse])
async def list_motel_reservations(
    motel_id: UUID, use_cases: UseCases
) -> list[ReservationResponse]:
    reservations = await use_cases["reservation_queries"].by_motel(motel_id)
    return [ReservationResponse.from_entity(r) for r in reservations]


@router.get("/rooms/{room_id}/reservations", response_model=list[ReservationResponse])
async def list_room_reservations(room_id: UUID, use_cases: UseCases) -> list[ReservationResponse]:
    reservations = await use_cases["reservation_queries"].by_room(room_id)
    return [ReservationResponse.from_entity(r) for r in reservations]


async def _transition(use_cases: dict, name: str, reservation_id: UUID) -> ReservationResponse:
    async def apply():
        return await use_cases[name].execute(reservation_id)

    return ReservationResponse.from_entity(await retry_on_deadlock(apply))


@router.post("/reservations/{reservation_id}/confirm", response_model=ReservationResponse)
async def confirm_reservation(reservation_id: UUID, use_cases: UseCases) -> ReservationResponse:
    return await _transition(use_cases, "confirm_reservation", reservation_id)


@router.post("/reservations/{reservation_id}/check-in", response_model=ReservationResponse)
async def check_in(reservation_id: UUID, use_cases: UseCases) -> ReservationResponse:
    return await _transition(use_cases, "check_in_reservation", reservation_id)


@router.post("/reservations/{reservation_id}/check-out", response_model=ReservationResponse)
async def check_out(reservation_id: UUID, use_cases: UseCases) -> ReservationResponse:
    return await _transition(use_cases, "check_out_reservation", reservation_id)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(reservation_id: UUID, use_cases: UseCases) -> ReservationResponse:
    return await _transition(use_cases, "cancel_reservation", reservation_id)
