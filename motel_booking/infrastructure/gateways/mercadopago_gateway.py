import asyncio
import logging
from decimal import Decimal
from typing import Any

import httpx
from pybreaker import CircuitBreaker

from motel_booking.application.interfaces.payment_gateway import (
    GatewayChargeRequest,
    GatewayPayment,
    GatewayRefund,
    PaymentGateway,
    PaymentGatewayError,
)
from motel_booking.infrastructure.circuit_breaker import CircuitBreakerError, mercadopago_breaker

logger = logging.getLogger(__name__)


def _decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


class MercadoPagoGateway(PaymentGateway):
    """
    MercadoPago Payments REST API, protected by a circuit breaker.

    The HTTP exchange is synchronous and runs in a worker thread so the
    breaker can account for it; pybreaker's own async support is not used.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.mercadopago.com",
        notification_url: str | None = None,
        timeout_seconds: float = 10.0,
        breaker: CircuitBreaker = mercadopago_breaker,
    ) -> None:
        if not access_token:
            raise ValueError("MercadoPago access token is required")
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._notification_url = notification_url
        self._timeout = timeout_seconds
        self._breaker = breaker

    async def create_charge(self, request: GatewayChargeRequest) -> GatewayPayment:
        body: dict[str, Any] = {
            "transaction_amount": float(request.amount),
            "description": request.description,
            "external_reference": request.external_reference,
            "payment_method_id": request.payment_method_id,
            "installments": request.installments,
            "payer": {
                "email": request.payer.email,
                "first_name": request.payer.first_name,
                "last_name": request.payer.last_name,
            },
            "metadata": {"currency": request.currency, **request.metadata},
        }
        if request.token:
            body["token"] = request.token
        if self._notification_url:
            body["notification_url"] = self._notification_url

        data = await self._call(
            "POST",
            "/v1/payments",
            json=body,
            idempotency_key=request.external_reference,
        )
        payment = self._to_payment(data)
        logger.info(
            "MercadoPago payment created",
            extra={
                "external_reference": request.external_reference,
                "mercadopago_payment_id": payment.id,
                "status": payment.status,
            },
        )
        return payment

    async def get_payment(self, external_id: str) -> GatewayPayment:
        data = await self._call("GET", f"/v1/payments/{external_id}")
        return self._to_payment(data)

    async def refund(self, external_id: str, amount: Decimal | None = None) -> GatewayRefund:
        body = {"amount": float(amount)} if amount is not None else {}
        data = await self._call(
            "POST",
            f"/v1/payments/{external_id}/refunds",
            json=body,
            idempotency_key=f"refund-{external_id}",
        )
        return GatewayRefund(
            id=str(data.get("id", "")),
            payment_id=str(data.get("payment_id") or external_id),
            status=str(data.get("status", "")),
            amount=_decimal(data.get("amount")),
        )

    async def _call(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> dict[str, Any]:
        try:
            return await asyncio.to_thread(
                self._breaker.call, self._send, method, path, json, idempotency_key
            )
        except CircuitBreakerError as exc:
            logger.error(
                "MercadoPago circuit breaker is open - service unavailable",
                extra={"path": path, "circuit_state": str(exc)},
            )
            raise PaymentGatewayError("Payment gateway temporarily unavailable") from exc
        except httpx.TimeoutException as exc:
            logger.warning(
                "MercadoPago request timeout", extra={"path": path, "timeout": self._timeout}
            )
            raise PaymentGatewayError(f"Payment gateway timeout after {self._timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "MercadoPago returned an error status",
                extra={
                    "path": path,
                    "http_status": exc.response.status_code,
                    "body": exc.response.text[:500],
                },
            )
            raise PaymentGatewayError(
                f"Payment gateway HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("MercadoPago request failed", extra={"path": path}, exc_info=exc)
            raise PaymentGatewayError(f"Payment gateway request failed: {exc}") from exc

    def _send(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None,
        idempotency_key: str | None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._access_token}"}
        if idempotency_key:
            headers["X-Idempotency-Key"] = idempotency_key
        with httpx.Client(timeout=self._timeout) as client:
            response = client.request(method, f"{self._base_url}{path}", json=json, headers=headers)
            response.raise_for_status()
            return response.json()

    @staticmethod
    def _to_payment(data: dict[str, Any]) -> GatewayPayment:
        return GatewayPayment(
            id=str(data.get("id", "")),
            status=str(data.get("status", "")),
            status_detail=data.get("status_detail"),
            external_reference=data.get("external_reference"),
            amount=_decimal(data.get("transaction_amount")),
            currency=data.get("currency_id"),
        )
