"""Asynchronous reconciliation of gateway payment notifications.

Notifications are only hints: the payment is always re-fetched from the
gateway and the authoritative status is applied through the same lifecycle
as the synchronous flow. Replays and out-of-order deliveries converge on the
gateway's current status. Nothing here raises to the caller.
"""

import logging
from uuid import UUID

from motel_booking.application.interfaces.clock import Clock
from motel_booking.application.interfaces.payment_gateway import (
    GATEWAY_APPROVED,
    GATEWAY_FAILED,
    GATEWAY_REFUNDED,
    PaymentGateway,
)
from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager
from motel_booking.application.services.payment_lifecycle import PaymentLifecycle
from motel_booking.domain.entities.payment import Payment, PaymentStatus
from motel_booking.domain.errors import DomainError

PAYMENT_NOTIFICATION_TYPE = "payment"

OUTCOME_IGNORED = "ignored"
OUTCOME_DISCARDED = "discarded"
OUTCOME_UNCHANGED = "unchanged"
OUTCOME_APPLIED = "applied"


def desired_status(external_status: str) -> PaymentStatus | None:
    status = (external_status or "").lower()
    if status == GATEWAY_APPROVED:
        return PaymentStatus.APPROVED
    if status in GATEWAY_FAILED:
        return PaymentStatus.FAILED
    if status in GATEWAY_REFUNDED:
        return PaymentStatus.REFUNDED
    return None


class HandlePaymentWebhookUseCase:
    def __init__(
        self,
        payment_repo: PaymentRepo,
        payment_gateway: PaymentGateway,
        lifecycle: PaymentLifecycle,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._payment_repo = payment_repo
        self._payment_gateway = payment_gateway
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, notification_type: str | None, external_payment_id: str | None) -> str:
        if notification_type != PAYMENT_NOTIFICATION_TYPE or not external_payment_id:
            self._logger.info(
                "Ignoring webhook notification",
                extra={"type": notification_type, "external_payment_id": external_payment_id},
            )
            return OUTCOME_IGNORED

        try:
            gateway_payment = await self._payment_gateway.get_payment(str(external_payment_id))
        except Exception:
            self._logger.error(
                "Could not fetch payment from gateway, notification discarded",
                extra={"external_payment_id": external_payment_id},
                exc_info=True,
            )
            return OUTCOME_DISCARDED

        return await self.reconcile(
            external_payment_id=gateway_payment.id or str(external_payment_id),
            external_status=gateway_payment.status,
            status_detail=gateway_payment.status_detail,
            external_reference=gateway_payment.external_reference,
        )

    async def reconcile(
        self,
        external_payment_id: str,
        external_status: str,
        status_detail: str | None = None,
        external_reference: str | None = None,
    ) -> str:
        context = {
            "external_payment_id": external_payment_id,
            "external_status": external_status,
            "external_reference": external_reference,
        }
        desired = desired_status(external_status)
        if desired is None:
            self._logger.info("Gateway status needs no local action", extra=context)
            return OUTCOME_IGNORED

        try:
            async with self._transaction_manager.start():
                payment = await self._resolve(external_payment_id, external_reference)
                if payment is None:
                    self._logger.warning(
                        "Webhook payment could not be resolved, discarded", extra=context
                    )
                    return OUTCOME_DISCARDED
                if payment.status == desired:
                    return OUTCOME_UNCHANGED
                await self._apply(payment, desired, external_payment_id, status_detail)
        except DomainError as exc:
            self._logger.warning(
                "Webhook rejected by payment state machine, discarded",
                extra={**context, "reason": exc.message},
            )
            return OUTCOME_DISCARDED
        except Exception:
            self._logger.error("Webhook reconciliation failed", extra=context, exc_info=True)
            return OUTCOME_DISCARDED

        self._logger.info(
            "Webhook applied",
            extra={**context, "payment_id": str(payment.id), "status": payment.status.value},
        )
        return OUTCOME_APPLIED

    async def _resolve(self, external_payment_id: str, external_reference: str | None) -> Payment | None:
        if external_reference:
            try:
                payment = await self._payment_repo.get_for_update(UUID(external_reference))
            except ValueError:
                payment = None
            if payment is not None:
                return payment
        return await self._payment_repo.get_by_transaction_id(external_payment_id)

    async def _apply(
        self,
        payment: Payment,
        desired: PaymentStatus,
        external_payment_id: str,
        status_detail: str | None,
    ) -> None:
        # A charge the gateway reports as settled went through processing even
        # if our synchronous call never recorded it.
        if payment.status == PaymentStatus.CREATED and desired != PaymentStatus.FAILED:
            payment.mark_processing(self._clock.now())
            await self._payment_repo.update(payment, expected_status=PaymentStatus.CREATED)

        if desired == PaymentStatus.APPROVED:
            await self._lifecycle.approve(payment, external_payment_id)
        elif desired == PaymentStatus.FAILED:
            await self._lifecycle.fail(payment, status_detail or "rejected by payment gateway")
        else:
            if payment.status == PaymentStatus.PROCESSING:
                await self._lifecycle.approve(payment, external_payment_id)
            # Refund already happened at the gateway; do not call it again.
            await self._lifecycle.refund(payment)
