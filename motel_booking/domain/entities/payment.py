"""Payment entity - monetary transaction for exactly one reservation."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from motel_booking.domain.errors import InvalidInputError, InvalidOperationError
from motel_booking.domain.events import (
    DomainEvent,
    PaymentApproved,
    PaymentFailed,
    PaymentRefunded,
    RefundReconciliationRequired,
)
from motel_booking.domain.value_objects.money import Money


class PaymentStatus(str, Enum):
    CREATED = "CREATED"
    PROCESSING = "PROCESSING"
    APPROVED = "APPROVED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


@dataclass
class Payment:
    """
    Payment driven through the external gateway.

    Created -> Processing -> Approved | Failed, and Approved -> Refunded.
    Failed payments cannot be refunded and Created cannot fail directly.
    """

    reservation_id: UUID
    amount: Money
    payment_method: str
    id: UUID = field(default_factory=uuid4)
    status: PaymentStatus = PaymentStatus.CREATED
    transaction_id: str | None = None
    failure_reason: str | None = None
    processed_at: datetime | None = None
    refund_reconciliation_required: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    pending_events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    # === Properties ===

    @property
    def supersedable(self) -> bool:
        """A failed payment may be replaced by a new attempt."""
        return self.status == PaymentStatus.FAILED

    # === Transitions ===

    def mark_processing(self, now: datetime) -> None:
        self._require("process", PaymentStatus.CREATED)
        self.status = PaymentStatus.PROCESSING
        self.updated_at = now

    def approve(self, transaction_id: str, now: datetime) -> None:
        self._require("approve", PaymentStatus.PROCESSING)
        if not transaction_id or not str(transaction_id).strip():
            raise InvalidInputError("transaction_id", "cannot be empty")
        self.status = PaymentStatus.APPROVED
        self.transaction_id = str(transaction_id).strip()
        self.processed_at = now
        self.updated_at = now
        self.pending_events.append(
            PaymentApproved(
                payment_id=self.id,
                reservation_id=self.reservation_id,
                transaction_id=self.transaction_id,
                occurred_on=now,
            )
        )

    def fail(self, reason: str, now: datetime) -> None:
        self._require("fail", PaymentStatus.PROCESSING)
        if not reason or not reason.strip():
            raise InvalidInputError("failure_reason", "cannot be empty")
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason.strip()
        self.processed_at = now
        self.updated_at = now
        self.pending_events.append(
            PaymentFailed(
                payment_id=self.id,
                reservation_id=self.reservation_id,
                reason=self.failure_reason,
                occurred_on=now,
            )
        )

    def attach_transaction(self, transaction_id: str, now: datetime) -> None:
        """Remember the gateway id of a charge that is still in flight."""
        self._require("attach transaction to", PaymentStatus.PROCESSING)
        if transaction_id:
            self.transaction_id = str(transaction_id)
            self.updated_at = now

    def ensure_refundable(self) -> None:
        self._require("refund", PaymentStatus.APPROVED)

    def refund(self, now: datetime) -> None:
        self.ensure_refundable()
        self.status = PaymentStatus.REFUNDED
        self.updated_at = now
        self.pending_events.append(
            PaymentRefunded(payment_id=self.id, reservation_id=self.reservation_id, occurred_on=now)
        )

    def flag_refund_unconfirmed(self, detail: str, now: datetime) -> None:
        """Record that the gateway did not confirm the refund we are applying locally."""
        self.refund_reconciliation_required = True
        self.updated_at = now
        self.pending_events.append(
            RefundReconciliationRequired(
                payment_id=self.id,
                reservation_id=self.reservation_id,
                transaction_id=self.transaction_id or "",
                detail=detail,
                occurred_on=now,
            )
        )

    def pull_events(self) -> list[DomainEvent]:
        events, self.pending_events = self.pending_events, []
        return events

    def _require(self, operation: str, *allowed: PaymentStatus) -> None:
        if self.status not in allowed:
            raise InvalidOperationError(
                entity="Payment",
                entity_id=self.id,
                operation=operation,
                current_status=self.status.value,
                required_status=[status.value for status in allowed],
            )

    # === Factory ===

    @classmethod
    def create(
        cls,
        reservation_id: UUID,
        amount: Money,
        payment_method: str,
        now: datetime,
    ) -> "Payment":
        if not payment_method or not payment_method.strip():
            raise InvalidInputError("payment_method", "cannot be empty")
        return cls(
            reservation_id=reservation_id,
            amount=amount,
            payment_method=payment_method.strip(),
            created_at=now,
            updated_at=now,
        )
