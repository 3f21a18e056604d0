from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from motel_booking.domain.entities.reservation import Reservation, ReservationStatus


class CreateReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    motel_id: UUID
    room_id: UUID
    user_id: UUID
    start_time: datetime
    end_time: datetime
    special_requests: str | None = Field(default=None, max_length=1000)


class ReservationResponse(BaseModel):
    id: UUID
    motel_id: UUID
    room_id: UUID
    user_id: UUID
    start_time: datetime
    end_time: datetime
    status: ReservationStatus
    total_amount: Decimal
    currency: str
    payment_id: UUID | None = None
    special_requests: str | None = None
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            motel_id=reservation.motel_id,
            room_id=reservation.room_id,
            user_id=reservation.user_id,
            start_time=reservation.time_range.start,
            end_time=reservation.time_range.end,
            status=reservation.status,
            total_amount=reservation.total_amount.amount,
            currency=reservation.total_amount.currency,
            payment_id=reservation.payment_id,
            special_requests=reservation.special_requests,
            check_in_time=reservation.check_in_time,
            check_out_time=reservation.check_out_time,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )


class NoShowSweepResponse(BaseModel):
    marked: int
    reservation_ids: list[UUID]
