import logging
from datetime import timedelta
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from motel_booking.api.deps import AsyncSessionLocal
from motel_booking.application.interfaces.clock import SystemClock
from motel_booking.application.services.payment_lifecycle import PaymentLifecycle
from motel_booking.application.use_cases.check_availability import CheckAvailabilityUseCase
from motel_booking.application.use_cases.create_payment import CreatePaymentUseCase
from motel_booking.application.use_cases.create_reservation import CreateReservationUseCase
from motel_booking.application.use_cases.handle_payment_webhook import HandlePaymentWebhookUseCase
from motel_booking.application.use_cases.manage_motels import ManageMotelsUseCase, ManageRoomsUseCase
from motel_booking.application.use_cases.manage_reservation import (
    CancelReservationUseCase,
    CheckInReservationUseCase,
    CheckOutReservationUseCase,
    ConfirmReservationUseCase,
    MarkNoShowsUseCase,
)
from motel_booking.application.use_cases.pay_reservation import PayReservationUseCase
from motel_booking.application.use_cases.process_payment import ProcessPaymentUseCase
from motel_booking.application.use_cases.queries import PaymentQueries, ReservationQueries
from motel_booking.application.use_cases.refund_payment import RefundPaymentUseCase
from motel_booking.config import Settings, get_settings
from motel_booking.infrastructure.db.repositories.motel_repo_sql import MotelRepoSQL
from motel_booking.infrastructure.db.repositories.outbox_publisher_sql import (
    OutboxEventPublisherSQL,
)
from motel_booking.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from motel_booking.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from motel_booking.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from motel_booking.infrastructure.gateways.mercadopago_gateway import MercadoPagoGateway
from motel_booking.infrastructure.in_memory.event_publisher import InMemoryEventPublisher
from motel_booking.infrastructure.in_memory.motel_repo import InMemoryMotelRepo
from motel_booking.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from motel_booking.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from motel_booking.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from motel_booking.infrastructure.in_memory.transaction_manager import NoopTransactionManager

logger = logging.getLogger(__name__)


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def in_memory_bundle() -> dict:
    return {
        "motel_repo": InMemoryMotelRepo(),
        "reservation_repo": InMemoryReservationRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "payment_gateway": StubPaymentGateway(),
        "event_publisher": InMemoryEventPublisher(),
        "tx_manager": NoopTransactionManager(),
        "clock": SystemClock(),
    }


@lru_cache(maxsize=1)
def _payment_gateway(
    access_token: str | None,
    base_url: str,
    notification_url: str | None,
    timeout_seconds: float,
):
    if not access_token:
        logger.warning("MERCADOPAGO_ACCESS_TOKEN not set, using stub payment gateway")
        return StubPaymentGateway()
    return MercadoPagoGateway(
        access_token=access_token,
        base_url=base_url,
        notification_url=notification_url,
        timeout_seconds=timeout_seconds,
    )


def build_use_cases(
    motel_repo,
    reservation_repo,
    payment_repo,
    payment_gateway,
    event_publisher,
    tx_manager,
    clock,
    clock_skew: timedelta = timedelta(minutes=5),
) -> dict:
    lifecycle = PaymentLifecycle(
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        event_publisher=event_publisher,
        clock=clock,
    )
    transition_deps = {
        "reservation_repo": reservation_repo,
        "event_publisher": event_publisher,
        "transaction_manager": tx_manager,
        "clock": clock,
    }
    admin_deps = {
        "motel_repo": motel_repo,
        "reservation_repo": reservation_repo,
        "transaction_manager": tx_manager,
        "clock": clock,
    }
    create_payment = CreatePaymentUseCase(
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        transaction_manager=tx_manager,
        clock=clock,
    )
    process_payment = ProcessPaymentUseCase(
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        payment_gateway=payment_gateway,
        lifecycle=lifecycle,
        transaction_manager=tx_manager,
        clock=clock,
    )
    return {
        "manage_motels": ManageMotelsUseCase(**admin_deps),
        "manage_rooms": ManageRoomsUseCase(**admin_deps),
        "check_availability": CheckAvailabilityUseCase(
            motel_repo=motel_repo, reservation_repo=reservation_repo
        ),
        "create_reservation": CreateReservationUseCase(
            motel_repo=motel_repo,
            reservation_repo=reservation_repo,
            event_publisher=event_publisher,
            transaction_manager=tx_manager,
            clock=clock,
            clock_skew=clock_skew,
        ),
        "confirm_reservation": ConfirmReservationUseCase(**transition_deps),
        "check_in_reservation": CheckInReservationUseCase(**transition_deps),
        "check_out_reservation": CheckOutReservationUseCase(**transition_deps),
        "cancel_reservation": CancelReservationUseCase(**transition_deps),
        "mark_no_shows": MarkNoShowsUseCase(**transition_deps),
        "reservation_queries": ReservationQueries(reservation_repo=reservation_repo),
        "create_payment": create_payment,
        "process_payment": process_payment,
        "pay_reservation": PayReservationUseCase(create_payment, process_payment),
        "refund_payment": RefundPaymentUseCase(
            payment_repo=payment_repo,
            payment_gateway=payment_gateway,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
        ),
        "handle_webhook": HandlePaymentWebhookUseCase(
            payment_repo=payment_repo,
            payment_gateway=payment_gateway,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "payment_queries": PaymentQueries(
            payment_repo=payment_repo, reservation_repo=reservation_repo
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    clock_skew = timedelta(minutes=settings.booking_clock_skew_minutes)
    if settings.use_in_memory:
        bundle = in_memory_bundle()
        return build_use_cases(
            motel_repo=bundle["motel_repo"],
            reservation_repo=bundle["reservation_repo"],
            payment_repo=bundle["payment_repo"],
            payment_gateway=bundle["payment_gateway"],
            event_publisher=bundle["event_publisher"],
            tx_manager=bundle["tx_manager"],
            clock=bundle["clock"],
            clock_skew=clock_skew,
        )

    if not session:
        raise RuntimeError("DB session not available")

    return build_use_cases(
        motel_repo=MotelRepoSQL(session),
        reservation_repo=ReservationRepoSQL(session),
        payment_repo=PaymentRepoSQL(session),
        payment_gateway=_payment_gateway(
            settings.mercadopago_access_token,
            settings.mercadopago_base_url,
            settings.mercadopago_webhook_url,
            settings.mercadopago_timeout_seconds,
        ),
        event_publisher=OutboxEventPublisherSQL(session),
        tx_manager=SQLAlchemyTransactionManager(session),
        clock=SystemClock(),
        clock_skew=clock_skew,
    )
