import logging
from uuid import UUID

from motel_booking.application.interfaces.clock import Clock
from motel_booking.application.interfaces.payment_gateway import (
    GATEWAY_APPROVED,
    GATEWAY_FAILED,
    GATEWAY_PENDING,
    GatewayChargeRequest,
    GatewayPayer,
    GatewayPayment,
    PaymentGateway,
)
from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager
from motel_booking.application.services.payment_lifecycle import PaymentLifecycle
from motel_booking.domain.entities.payment import Payment, PaymentStatus
from motel_booking.domain.entities.reservation import Reservation
from motel_booking.domain.errors import (
    GatewayFailureError,
    NotFoundError,
    PaymentAmountMismatchError,
)


def default_payer(reservation: Reservation) -> GatewayPayer:
    return GatewayPayer(
        email=f"customer-{reservation.user_id}@example.com",
        first_name="Customer",
        last_name="User",
    )


class ProcessPaymentUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        payment_gateway: PaymentGateway,
        lifecycle: PaymentLifecycle,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._payment_gateway = payment_gateway
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, payment_id: UUID, payer: GatewayPayer | None = None) -> Payment:
        async with self._transaction_manager.start():
            payment = await self._payment_repo.get_for_update(payment_id)
            if payment is None:
                raise NotFoundError("Payment", payment_id)
            reservation = await self._reservation_repo.get_by_id(payment.reservation_id)
            if reservation is None:
                raise NotFoundError("Reservation", payment.reservation_id)

            if payment.amount != reservation.total_amount:
                self._logger.critical(
                    "Payment amount does not match reservation total",
                    extra={
                        "payment_id": str(payment.id),
                        "reservation_id": str(reservation.id),
                        "payment_amount": str(payment.amount),
                        "reservation_total": str(reservation.total_amount),
                    },
                )
                raise PaymentAmountMismatchError(
                    payment_id=payment.id,
                    expected=str(reservation.total_amount),
                    actual=str(payment.amount),
                )

            payment.mark_processing(self._clock.now())
            await self._payment_repo.update(payment, expected_status=PaymentStatus.CREATED)

        request = self._build_request(payment, reservation, payer or default_payer(reservation))
        try:
            result = await self._payment_gateway.create_charge(request)
        except Exception as exc:
            detail = str(exc) or type(exc).__name__
            self._logger.error(
                "Payment gateway call failed",
                extra={"payment_id": str(payment.id), "detail": detail},
                exc_info=True,
            )
            async with self._transaction_manager.start():
                current = await self._reload_processing(payment.id)
                if current.status != PaymentStatus.PROCESSING:
                    # A webhook settled the charge while the reply was lost.
                    return current
                await self._lifecycle.fail(current, f"Gateway error: {detail}")
            raise GatewayFailureError(payment.id, detail) from exc

        async with self._transaction_manager.start():
            current = await self._reload_processing(payment.id)
            if current.status != PaymentStatus.PROCESSING:
                return current
            return await self._apply_result(current, result)

    async def _reload_processing(self, payment_id: UUID) -> Payment:
        """Locked re-read after the gateway call; a webhook may have settled it meanwhile."""
        payment = await self._payment_repo.get_for_update(payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        if payment.status != PaymentStatus.PROCESSING:
            self._logger.info(
                "Payment already settled by webhook, gateway reply not applied",
                extra={"payment_id": str(payment.id), "status": payment.status.value},
            )
        return payment

    async def _apply_result(self, payment: Payment, result: GatewayPayment) -> Payment:
        if result.status == GATEWAY_APPROVED:
            return await self._lifecycle.approve(payment, result.id)
        if result.status in GATEWAY_FAILED:
            return await self._lifecycle.fail(payment, result.status_detail or result.status)

        # Still in flight; the webhook will settle it.
        payment.attach_transaction(result.id, self._clock.now())
        await self._payment_repo.update(payment, expected_status=PaymentStatus.PROCESSING)
        pending = result.status in GATEWAY_PENDING
        log = self._logger.info if pending else self._logger.warning
        log(
            "Payment pending at gateway" if pending else "Unrecognised gateway status, awaiting webhook",
            extra={
                "payment_id": str(payment.id),
                "transaction_id": result.id,
                "gateway_status": result.status,
            },
        )
        return payment

    @staticmethod
    def _build_request(
        payment: Payment, reservation: Reservation, payer: GatewayPayer
    ) -> GatewayChargeRequest:
        return GatewayChargeRequest(
            amount=payment.amount.amount,
            currency=payment.amount.currency,
            description=f"Reservation {reservation.id}",
            external_reference=str(payment.id),
            payment_method_id=payment.payment_method,
            payer=payer,
            metadata={
                "reservation_id": str(reservation.id),
                "motel_id": str(reservation.motel_id),
                "room_id": str(reservation.room_id),
            },
        )
