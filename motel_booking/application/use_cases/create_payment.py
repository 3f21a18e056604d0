import logging
from uuid import UUID

from motel_booking.application.interfaces.clock import Clock
from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager
from motel_booking.domain.entities.payment import Payment
from motel_booking.domain.entities.reservation import ReservationStatus
from motel_booking.domain.errors import (
    BusinessRuleViolationError,
    InvalidOperationError,
    NotFoundError,
)


class CreatePaymentUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: UUID, payment_method: str) -> Payment:
        now = self._clock.now()
        async with self._transaction_manager.start():
            reservation = await self._reservation_repo.get_by_id(reservation_id)
            if reservation is None:
                raise NotFoundError("Reservation", reservation_id)
            if reservation.status != ReservationStatus.PENDING:
                raise InvalidOperationError(
                    entity="Reservation",
                    entity_id=reservation.id,
                    operation="create payment for",
                    current_status=reservation.status.value,
                    required_status=ReservationStatus.PENDING.value,
                )

            existing = await self._payment_repo.list_by_reservation(reservation.id)
            active = [payment for payment in existing if not payment.supersedable]
            if active:
                raise BusinessRuleViolationError(
                    rule="ONE_ACTIVE_PAYMENT_PER_RESERVATION",
                    message=(
                        f"Reservation {reservation.id} already has payment {active[-1].id} "
                        f"in status '{active[-1].status.value}'"
                    ),
                )

            payment = Payment.create(
                reservation_id=reservation.id,
                amount=reservation.total_amount,
                payment_method=payment_method,
                now=now,
            )
            await self._payment_repo.add(payment)
            reservation.assign_payment(payment.id, now)
            await self._reservation_repo.update(reservation)

        self._logger.info(
            "Payment created",
            extra={
                "payment_id": str(payment.id),
                "reservation_id": str(reservation.id),
                "superseded": len(existing),
            },
        )
        return payment
