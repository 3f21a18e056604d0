from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass
class GatewayPayer:
    email: str
    first_name: str
    last_name: str


@dataclass
class GatewayChargeRequest:
    amount: Decimal
    currency: str
    description: str
    external_reference: str
    payment_method_id: str
    payer: GatewayPayer
    metadata: dict[str, Any] = field(default_factory=dict)
    token: str | None = None  # card token, for card methods
    installments: int = 1


@dataclass
class GatewayPayment:
    """Payment as reported by the gateway."""

    id: str
    status: str
    status_detail: str | None = None
    external_reference: str | None = None
    amount: Decimal | None = None
    currency: str | None = None


@dataclass
class GatewayRefund:
    id: str
    payment_id: str
    status: str
    amount: Decimal | None = None


# Gateway statuses we act on. Everything else is left alone.
GATEWAY_APPROVED = "approved"
GATEWAY_PENDING = ("pending", "in_process", "authorized")
GATEWAY_FAILED = ("rejected", "cancelled")
GATEWAY_REFUNDED = ("refunded", "charged_back")


class PaymentGatewayError(Exception):
    """Transport or protocol failure talking to the gateway."""


class PaymentGateway:
    async def create_charge(self, request: GatewayChargeRequest) -> GatewayPayment:
        raise NotImplementedError

    async def get_payment(self, external_id: str) -> GatewayPayment:
        raise NotImplementedError

    async def refund(self, external_id: str, amount: Decimal | None = None) -> GatewayRefund:
        raise NotImplementedError
