"""Reservation lifecycle transitions driven by staff or the guest."""

import logging
from uuid import UUID

from motel_booking.application.interfaces.clock import Clock
from motel_booking.application.interfaces.event_publisher import EventPublisher
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager
from motel_booking.domain.entities.reservation import Reservation, ReservationStatus
from motel_booking.domain.errors import DomainError, NotFoundError


class _ReservationTransition:
    operation = ""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        event_publisher: EventPublisher,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._event_publisher = event_publisher
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: UUID) -> Reservation:
        async with self._transaction_manager.start():
            reservation = await self._reservation_repo.get_by_id(reservation_id)
            if reservation is None:
                raise NotFoundError("Reservation", reservation_id)
            previous = reservation.status
            self._apply(reservation)
            await self._reservation_repo.update(reservation)
            await self._event_publisher.publish(reservation.pull_events())

        self._logger.info(
            "Reservation transition applied",
            extra={
                "reservation_id": str(reservation.id),
                "operation": self.operation,
                "from_status": previous.value,
                "to_status": reservation.status.value,
            },
        )
        return reservation

    def _apply(self, reservation: Reservation) -> None:
        raise NotImplementedError


class ConfirmReservationUseCase(_ReservationTransition):
    """Confirming re-checks overlap when the repository persists the change."""

    operation = "confirm"

    def _apply(self, reservation: Reservation) -> None:
        reservation.confirm(self._clock.now())


class CheckInReservationUseCase(_ReservationTransition):
    operation = "check_in"

    def _apply(self, reservation: Reservation) -> None:
        reservation.check_in(self._clock.now())


class CheckOutReservationUseCase(_ReservationTransition):
    operation = "check_out"

    def _apply(self, reservation: Reservation) -> None:
        reservation.check_out(self._clock.now())


class CancelReservationUseCase(_ReservationTransition):
    operation = "cancel"

    def _apply(self, reservation: Reservation) -> None:
        reservation.cancel(self._clock.now())


class MarkNoShowsUseCase:
    """Sweep confirmed reservations whose window ended without a check-in."""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        event_publisher: EventPublisher,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._event_publisher = event_publisher
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, limit: int = 100) -> list[Reservation]:
        now = self._clock.now()
        marked: list[Reservation] = []
        confirmed = await self._reservation_repo.list_by_status(ReservationStatus.CONFIRMED)
        for reservation in confirmed:
            if len(marked) >= limit:
                break
            if reservation.time_range.end > now:
                continue
            try:
                async with self._transaction_manager.start():
                    current = await self._reservation_repo.get_by_id(reservation.id)
                    if current is None:
                        continue
                    current.mark_no_show(now)
                    await self._reservation_repo.update(current)
                    await self._event_publisher.publish(current.pull_events())
            except DomainError as exc:
                # Checked in or cancelled since the listing.
                self._logger.info(
                    "Skipping no-show candidate",
                    extra={"reservation_id": str(reservation.id), "reason": exc.message},
                )
                continue
            marked.append(current)

        if marked:
            self._logger.info("Reservations marked as no-show", extra={"count": len(marked)})
        return marked
