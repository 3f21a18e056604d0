"""Payment outcome cascades shared by the synchronous flow and the webhook reconciler.

Callers own the transaction; every method persists the payment first and
then applies the reservation side effect, publishing the drained events last.
The payment write only lands while the stored status is still the one the
caller read, so a stale copy raises ``StaleStateError`` instead of
overwriting a concurrent settlement.
"""

import logging

from motel_booking.application.interfaces.clock import Clock
from motel_booking.application.interfaces.event_publisher import EventPublisher
from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.domain.entities.payment import Payment
from motel_booking.domain.entities.reservation import ReservationStatus
from motel_booking.domain.errors import BookingConflictError
from motel_booking.domain.events import DomainEvent, ReservationConfirmationConflict


class PaymentLifecycle:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        event_publisher: EventPublisher,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._event_publisher = event_publisher
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def approve(self, payment: Payment, transaction_id: str) -> Payment:
        """Approve the payment and confirm its reservation if it is still pending."""
        now = self._clock.now()
        previous = payment.status
        payment.approve(transaction_id, now)
        await self._payment_repo.update(payment, expected_status=previous)
        events: list[DomainEvent] = payment.pull_events()

        reservation = await self._reservation_repo.get_by_id(payment.reservation_id)
        if reservation is not None and reservation.status == ReservationStatus.PENDING:
            reservation.confirm(now)
            try:
                await self._reservation_repo.update(reservation)
            except BookingConflictError as exc:
                # Money was taken but the window is gone: keep the payment
                # approved and leave the reservation pending for an operator.
                reservation.pull_events()
                self._logger.error(
                    "Approved payment could not confirm its reservation",
                    extra={
                        "payment_id": str(payment.id),
                        "reservation_id": str(reservation.id),
                        "conflicting_reservation_id": str(exc.conflicting_reservation_id),
                    },
                )
                events.append(
                    ReservationConfirmationConflict(
                        reservation_id=reservation.id,
                        payment_id=payment.id,
                        conflicting_reservation_id=exc.conflicting_reservation_id,
                        occurred_on=now,
                    )
                )
            else:
                events.extend(reservation.pull_events())

        await self._event_publisher.publish(events)
        self._logger.info(
            "Payment approved",
            extra={"payment_id": str(payment.id), "transaction_id": payment.transaction_id},
        )
        return payment

    async def fail(self, payment: Payment, reason: str) -> Payment:
        previous = payment.status
        payment.fail(reason, self._clock.now())
        await self._payment_repo.update(payment, expected_status=previous)
        await self._event_publisher.publish(payment.pull_events())
        self._logger.warning(
            "Payment failed",
            extra={"payment_id": str(payment.id), "reason": payment.failure_reason},
        )
        return payment

    async def refund(self, payment: Payment, unconfirmed_detail: str | None = None) -> Payment:
        """
        Refund locally and cancel the reservation when it can still be cancelled.

        ``unconfirmed_detail`` marks a refund the gateway did not confirm; the
        payment is flagged for reconciliation and an alert event is emitted.
        """
        now = self._clock.now()
        payment.ensure_refundable()
        previous = payment.status
        if unconfirmed_detail is not None:
            payment.flag_refund_unconfirmed(unconfirmed_detail, now)
            self._logger.error(
                "Refund not confirmed by payment gateway, reconciliation required",
                extra={
                    "payment_id": str(payment.id),
                    "transaction_id": payment.transaction_id,
                    "detail": unconfirmed_detail,
                },
            )
        payment.refund(now)
        await self._payment_repo.update(payment, expected_status=previous)
        events: list[DomainEvent] = payment.pull_events()

        reservation = await self._reservation_repo.get_by_id(payment.reservation_id)
        if reservation is not None and reservation.can_be_cancelled:
            reservation.cancel(now)
            await self._reservation_repo.update(reservation)
            events.extend(reservation.pull_events())

        await self._event_publisher.publish(events)
        self._logger.info("Payment refunded", extra={"payment_id": str(payment.id)})
        return payment
