"""Domain events.

Plain immutable records appended to an entity's pending list and drained by
the application layer after persistence. Delivery (outbox, pub/sub) is not
part of the state machines' correctness.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    aggregate_type = "UNKNOWN"

    @property
    def event_type(self) -> str:
        return type(self).__name__

    @property
    def aggregate_id(self) -> UUID:
        raise NotImplementedError

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        for key, value in payload.items():
            if isinstance(value, UUID):
                payload[key] = str(value)
            elif isinstance(value, datetime):
                payload[key] = value.isoformat()
        return payload


@dataclass(frozen=True)
class ReservationEvent(DomainEvent):
    reservation_id: UUID
    aggregate_type = "RESERVATION"

    @property
    def aggregate_id(self) -> UUID:
        return self.reservation_id


@dataclass(frozen=True)
class PaymentEvent(DomainEvent):
    payment_id: UUID
    reservation_id: UUID
    aggregate_type = "PAYMENT"

    @property
    def aggregate_id(self) -> UUID:
        return self.payment_id


@dataclass(frozen=True)
class ReservationCreated(ReservationEvent):
    user_id: UUID
    motel_id: UUID
    room_id: UUID
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ReservationConfirmed(ReservationEvent):
    room_id: UUID
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ReservationCancelled(ReservationEvent):
    user_id: UUID
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ReservationNoShow(ReservationEvent):
    user_id: UUID
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ReservationConfirmationConflict(ReservationEvent):
    """A paid reservation could not be confirmed because its window was taken."""

    payment_id: UUID
    conflicting_reservation_id: UUID | None
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class PaymentApproved(PaymentEvent):
    transaction_id: str
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class PaymentFailed(PaymentEvent):
    reason: str
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class PaymentRefunded(PaymentEvent):
    occurred_on: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class RefundReconciliationRequired(PaymentEvent):
    """The local refund went ahead without a confirmed gateway refund."""

    transaction_id: str
    detail: str
    occurred_on: datetime = field(default_factory=_utcnow)
