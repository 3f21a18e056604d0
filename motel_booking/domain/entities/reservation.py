"""Reservation entity - aggregate root of the booking domain."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from motel_booking.domain.entities.room import Room
from motel_booking.domain.errors import InvalidInputError, InvalidOperationError
from motel_booking.domain.events import (
    DomainEvent,
    ReservationCancelled,
    ReservationConfirmed,
    ReservationCreated,
    ReservationNoShow,
)
from motel_booking.domain.value_objects.money import Money
from motel_booking.domain.value_objects.time_range import TimeRange

MAX_SPECIAL_REQUESTS_LENGTH = 1000


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Statuses that count against room availability.
BLOCKING_STATUSES = frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN})

CANCELLABLE_STATUSES = (
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
    ReservationStatus.CHECKED_IN,
)


def calculate_total_amount(room: Room, time_range: TimeRange) -> Money:
    """Linear hourly price: price_per_hour x duration in hours."""
    return room.price_per_hour.multiply(time_range.hours)


@dataclass
class Reservation:
    """
    A booking of one room for one time range by one user.

    Status only changes through the transition methods below. Each transition
    either moves to the documented next state or raises
    ``InvalidOperationError`` without touching the entity.
    """

    motel_id: UUID
    room_id: UUID
    user_id: UUID
    time_range: TimeRange
    total_amount: Money
    id: UUID = field(default_factory=uuid4)
    status: ReservationStatus = ReservationStatus.PENDING
    payment_id: UUID | None = None
    special_requests: str | None = None
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    pending_events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    # === Properties ===

    @property
    def is_blocking(self) -> bool:
        return self.status in BLOCKING_STATUSES

    @property
    def can_be_cancelled(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def blocks(self, room_id: UUID, time_range: TimeRange) -> bool:
        """True when this reservation holds ``room_id`` during ``time_range``."""
        return self.room_id == room_id and self.is_blocking and self.time_range.overlaps(
            time_range
        )

    # === Transitions ===

    def confirm(self, now: datetime) -> None:
        self._require("confirm", ReservationStatus.PENDING)
        self.status = ReservationStatus.CONFIRMED
        self.updated_at = now
        self.pending_events.append(
            ReservationConfirmed(reservation_id=self.id, room_id=self.room_id, occurred_on=now)
        )

    def check_in(self, now: datetime) -> None:
        self._require("check in", ReservationStatus.CONFIRMED)
        self.status = ReservationStatus.CHECKED_IN
        self.check_in_time = now
        self.updated_at = now

    def check_out(self, now: datetime) -> None:
        self._require("check out", ReservationStatus.CHECKED_IN)
        self.status = ReservationStatus.CHECKED_OUT
        self.check_out_time = now
        self.updated_at = now

    def cancel(self, now: datetime) -> None:
        self._require("cancel", *CANCELLABLE_STATUSES)
        self.status = ReservationStatus.CANCELLED
        self.updated_at = now
        self.pending_events.append(
            ReservationCancelled(reservation_id=self.id, user_id=self.user_id, occurred_on=now)
        )

    def mark_no_show(self, now: datetime) -> None:
        """Confirmed reservation whose window ended without a check-in."""
        self._require("mark as no-show", ReservationStatus.CONFIRMED)
        if now < self.time_range.end:
            raise InvalidOperationError(
                entity="Reservation",
                entity_id=self.id,
                operation="mark as no-show",
                current_status=self.status.value,
                required_status=(
                    f"{ReservationStatus.CONFIRMED.value} with window ended at "
                    f"{self.time_range.end.isoformat()}"
                ),
            )
        self.status = ReservationStatus.NO_SHOW
        self.updated_at = now
        self.pending_events.append(
            ReservationNoShow(reservation_id=self.id, user_id=self.user_id, occurred_on=now)
        )

    def assign_payment(self, payment_id: UUID, now: datetime | None = None) -> None:
        self.payment_id = payment_id
        if now is not None:
            self.updated_at = now

    def pull_events(self) -> list[DomainEvent]:
        events, self.pending_events = self.pending_events, []
        return events

    def _require(self, operation: str, *allowed: ReservationStatus) -> None:
        if self.status not in allowed:
            raise InvalidOperationError(
                entity="Reservation",
                entity_id=self.id,
                operation=operation,
                current_status=self.status.value,
                required_status=[status.value for status in allowed],
            )

    # === Factory ===

    @classmethod
    def create(
        cls,
        motel_id: UUID,
        room: Room,
        user_id: UUID,
        time_range: TimeRange,
        now: datetime,
        special_requests: str | None = None,
    ) -> "Reservation":
        """Create a pending reservation priced from the room's hourly rate."""
        if special_requests is not None:
            special_requests = special_requests.strip() or None
        if special_requests and len(special_requests) > MAX_SPECIAL_REQUESTS_LENGTH:
            raise InvalidInputError(
                "special_requests",
                f"cannot exceed {MAX_SPECIAL_REQUESTS_LENGTH} characters",
            )
        reservation = cls(
            motel_id=motel_id,
            room_id=room.id,
            user_id=user_id,
            time_range=time_range,
            total_amount=calculate_total_amount(room, time_range),
            special_requests=special_requests,
            created_at=now,
            updated_at=now,
        )
        reservation.pending_events.append(
            ReservationCreated(
                reservation_id=reservation.id,
                user_id=user_id,
                motel_id=motel_id,
                room_id=room.id,
                occurred_on=now,
            )
        )
        return reservation
