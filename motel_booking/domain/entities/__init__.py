"""Entities of the reservation domain."""

from motel_booking.domain.entities.motel import Motel
from motel_booking.domain.entities.payment import Payment, PaymentStatus
from motel_booking.domain.entities.reservation import (
    BLOCKING_STATUSES,
    Reservation,
    ReservationStatus,
    calculate_total_amount,
)
from motel_booking.domain.entities.room import Room, RoomType

__all__ = [
    # Motel
    "Motel",
    # Room
    "Room",
    "RoomType",
    # Reservation
    "Reservation",
    "ReservationStatus",
    "BLOCKING_STATUSES",
    "calculate_total_amount",
    # Payment
    "Payment",
    "PaymentStatus",
]
