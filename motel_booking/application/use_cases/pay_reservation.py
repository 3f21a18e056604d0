import logging
from uuid import UUID

from motel_booking.application.interfaces.payment_gateway import GatewayPayer
from motel_booking.application.use_cases.create_payment import CreatePaymentUseCase
from motel_booking.application.use_cases.process_payment import ProcessPaymentUseCase
from motel_booking.domain.entities.payment import Payment


class PayReservationUseCase:
    """One-shot checkout: create the payment for a pending reservation and charge it."""

    def __init__(
        self,
        create_payment: CreatePaymentUseCase,
        process_payment: ProcessPaymentUseCase,
    ) -> None:
        self._create_payment = create_payment
        self._process_payment = process_payment
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        reservation_id: UUID,
        payment_method: str,
        payer: GatewayPayer | None = None,
    ) -> Payment:
        payment = await self._create_payment.execute(reservation_id, payment_method)
        self._logger.info(
            "Charging reservation",
            extra={"reservation_id": str(reservation_id), "payment_id": str(payment.id)},
        )
        return await self._process_payment.execute(payment.id, payer=payer)
