"""Domain errors for the motel reservation system.

Every error carries an ``ErrorKind`` tag plus structured context. The API
layer translates the kind into an HTTP status through a single lookup table
(see ``motel_booking.api.errors``).
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    BOOKING_CONFLICT = "BOOKING_CONFLICT"
    INVALID_OPERATION = "INVALID_OPERATION"
    BUSINESS_RULE = "BUSINESS_RULE"
    GATEWAY_FAILURE = "GATEWAY_FAILURE"
    PAYMENT_AMOUNT_MISMATCH = "PAYMENT_AMOUNT_MISMATCH"
    STALE_STATE = "STALE_STATE"


class DomainError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.context = context or {}
        super().__init__(self.message)


# === Lookup errors ===


class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} with ID '{entity_id}' was not found",
            code=f"{entity.upper()}_NOT_FOUND",
            context={"entity": entity, "entity_id": str(entity_id)},
        )
        self.entity = entity
        self.entity_id = entity_id


# === Validation errors ===


class InvalidInputError(DomainError):
    """Malformed construction arguments."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Invalid '{field}': {message}",
            code="INVALID_INPUT",
            context={"field": field},
        )
        self.field = field


class CurrencyMismatchError(InvalidInputError):
    def __init__(self, left: str, right: str, operation: str):
        super().__init__(
            field="currency",
            message=f"cannot {operation} {left} and {right}",
        )
        self.code = "CURRENCY_MISMATCH"
        self.context.update({"left": left, "right": right})


class InvalidTimeRangeError(InvalidInputError):
    def __init__(self, start: datetime, end: datetime, reason: str):
        super().__init__(field="time_range", message=reason)
        self.code = "INVALID_TIME"
        self.context.update({"start": start.isoformat(), "end": end.isoformat()})
        self.start = start
        self.end = end


# === Booking errors ===


class RoomUnavailableError(DomainError):
    kind = ErrorKind.ROOM_UNAVAILABLE

    def __init__(self, room_id: UUID):
        super().__init__(
            message=f"Room {room_id} is currently unavailable for booking",
            code="ROOM_UNAVAILABLE",
            context={"room_id": str(room_id)},
        )
        self.room_id = room_id


class BookingConflictError(DomainError):
    """The requested window overlaps a blocking reservation on the same room."""

    kind = ErrorKind.BOOKING_CONFLICT

    def __init__(
        self,
        room_id: UUID,
        start: datetime,
        end: datetime,
        conflicting_reservation_id: UUID | None = None,
    ):
        window = f"{start:%Y-%m-%d %H:%M} to {end:%Y-%m-%d %H:%M}"
        conflict = (
            f" (conflicts with reservation {conflicting_reservation_id})"
            if conflicting_reservation_id
            else ""
        )
        super().__init__(
            message=f"Room {room_id} is already booked from {window}{conflict}",
            code="BOOKING_CONFLICT",
            context={
                "room_id": str(room_id),
                "start": start.isoformat(),
                "end": end.isoformat(),
                "conflicting_reservation_id": (
                    str(conflicting_reservation_id) if conflicting_reservation_id else None
                ),
            },
        )
        self.room_id = room_id
        self.start = start
        self.end = end
        self.conflicting_reservation_id = conflicting_reservation_id


# === State machine errors ===


class InvalidOperationError(DomainError):
    """A state-machine precondition was violated."""

    kind = ErrorKind.INVALID_OPERATION

    def __init__(
        self,
        entity: str,
        entity_id: UUID,
        operation: str,
        current_status: str,
        required_status: str | list[str],
    ):
        required = required_status if isinstance(required_status, str) else ", ".join(
            required_status
        )
        super().__init__(
            message=(
                f"Cannot {operation} {entity.lower()} {entity_id}: "
                f"current status '{current_status}', required '{required}'"
            ),
            code=f"INVALID_{entity.upper()}_OPERATION",
            context={
                "entity_id": str(entity_id),
                "operation": operation,
                "current_status": current_status,
                "required_status": required,
            },
        )
        self.entity = entity
        self.entity_id = entity_id
        self.operation = operation
        self.current_status = current_status
        self.required_status = required_status


class BusinessRuleViolationError(DomainError):
    kind = ErrorKind.BUSINESS_RULE

    def __init__(self, rule: str, message: str):
        super().__init__(
            message=f"Business rule violation ({rule}): {message}",
            code="BUSINESS_RULE_VIOLATION",
            context={"rule": rule},
        )
        self.rule = rule


# === Payment errors ===


class GatewayFailureError(DomainError):
    """The payment gateway call errored or timed out."""

    kind = ErrorKind.GATEWAY_FAILURE

    def __init__(self, payment_id: UUID, detail: str):
        super().__init__(
            message=f"Payment {payment_id} could not be processed by the payment gateway",
            code="GATEWAY_FAILURE",
            context={"payment_id": str(payment_id), "detail": detail},
        )
        self.payment_id = payment_id
        self.detail = detail


class PaymentAmountMismatchError(DomainError):
    kind = ErrorKind.PAYMENT_AMOUNT_MISMATCH

    def __init__(self, payment_id: UUID, expected: str, actual: str):
        super().__init__(
            message=f"Payment {payment_id} amount {actual} does not match reservation total {expected}",
            code="PAYMENT_AMOUNT_MISMATCH",
            context={"payment_id": str(payment_id), "expected": expected, "actual": actual},
        )
        self.payment_id = payment_id
        self.expected = expected
        self.actual = actual


class StaleStateError(DomainError):
    """A write was based on a status that has changed since it was read."""

    kind = ErrorKind.STALE_STATE

    def __init__(self, entity: str, entity_id: UUID, expected_status: str, current_status: str):
        super().__init__(
            message=(
                f"{entity} {entity_id} changed concurrently: expected status "
                f"'{expected_status}', found '{current_status}'"
            ),
            code=f"STALE_{entity.upper()}",
            context={
                "entity_id": str(entity_id),
                "expected_status": expected_status,
                "current_status": current_status,
            },
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected_status = expected_status
        self.current_status = current_status
