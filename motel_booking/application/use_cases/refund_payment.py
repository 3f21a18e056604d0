import logging
from uuid import UUID

from motel_booking.application.interfaces.payment_gateway import PaymentGateway
from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager
from motel_booking.application.services.payment_lifecycle import PaymentLifecycle
from motel_booking.domain.entities.payment import Payment
from motel_booking.domain.errors import NotFoundError

CONFIRMED_REFUND_STATUSES = ("approved", "refunded")


class RefundPaymentUseCase:
    def __init__(
        self,
        payment_repo: PaymentRepo,
        payment_gateway: PaymentGateway,
        lifecycle: PaymentLifecycle,
        transaction_manager: TransactionManager,
    ) -> None:
        self._payment_repo = payment_repo
        self._payment_gateway = payment_gateway
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, payment_id: UUID) -> Payment:
        # Committed before the gateway call so the re-read below sees fresh state.
        async with self._transaction_manager.start():
            payment = await self._payment_repo.get_by_id(payment_id)
            if payment is None:
                raise NotFoundError("Payment", payment_id)
            payment.ensure_refundable()

        unconfirmed_detail = None
        if payment.transaction_id:
            unconfirmed_detail = await self._refund_at_gateway(payment)

        async with self._transaction_manager.start():
            current = await self._payment_repo.get_for_update(payment_id)
            if current is None:
                raise NotFoundError("Payment", payment_id)
            return await self._lifecycle.refund(current, unconfirmed_detail)

    async def _refund_at_gateway(self, payment: Payment) -> str | None:
        """Returns None when the gateway confirmed the refund, else why it did not."""
        try:
            refund = await self._payment_gateway.refund(payment.transaction_id)
        except Exception as exc:
            self._logger.warning(
                "Gateway refund call failed",
                extra={"payment_id": str(payment.id), "transaction_id": payment.transaction_id},
                exc_info=True,
            )
            return f"Gateway refund failed: {str(exc) or type(exc).__name__}"
        if refund.status not in CONFIRMED_REFUND_STATUSES:
            return f"Gateway refund {refund.id} returned status '{refund.status}'"
        return None
