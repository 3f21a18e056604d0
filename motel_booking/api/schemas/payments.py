from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr

from motel_booking.application.interfaces.payment_gateway import GatewayPayer
from motel_booking.domain.entities.payment import Payment, PaymentStatus


class CreatePaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reservation_id: UUID
    payment_method: constr(strip_whitespace=True, min_length=1, max_length=50)


class PayerSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    first_name: constr(strip_whitespace=True, min_length=1, max_length=100)
    last_name: constr(strip_whitespace=True, min_length=1, max_length=100)

    def to_gateway(self) -> GatewayPayer:
        return GatewayPayer(email=self.email, first_name=self.first_name, last_name=self.last_name)


class ProcessPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payer: PayerSchema | None = None


class PayReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_method: constr(strip_whitespace=True, min_length=1, max_length=50)
    payer: PayerSchema | None = None


class PaymentResponse(BaseModel):
    id: UUID
    reservation_id: UUID
    amount: Decimal
    currency: str
    status: PaymentStatus
    payment_method: str
    transaction_id: str | None = None
    failure_reason: str | None = None
    processed_at: datetime | None = None
    refund_reconciliation_required: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            reservation_id=payment.reservation_id,
            amount=payment.amount.amount,
            currency=payment.amount.currency,
            status=payment.status,
            payment_method=payment.payment_method,
            transaction_id=payment.transaction_id,
            failure_reason=payment.failure_reason,
            processed_at=payment.processed_at,
            refund_reconciliation_required=payment.refund_reconciliation_required,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )


class MercadoPagoNotification(BaseModel):
    """Webhook body: ``{type, data: {id}}`` or the legacy ``{type|topic, id}``."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    topic: str | None = None
    action: str | None = None
    id: str | int | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def notification_type(self) -> str | None:
        return self.type or self.topic

    @property
    def payment_id(self) -> str | None:
        value = self.data.get("id") or self.id
        return str(value) if value is not None else None
