"""
Use cases over the SQLAlchemy adapters on an in-memory SQLite database.

Checks that the SQL repositories honour the same contracts as the in-memory
ones: overlap re-check on blocking writes, transactional rollback and the
outbox written in the same unit of work.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from motel_booking.api.dependencies import build_use_cases
from motel_booking.domain.entities.payment import PaymentStatus
from motel_booking.domain.entities.reservation import ReservationStatus
from motel_booking.domain.errors import (
    BookingConflictError,
    BusinessRuleViolationError,
    StaleStateError,
)
from motel_booking.domain.value_objects.address import Address
from motel_booking.domain.value_objects.money import Money
from motel_booking.infrastructure.db.repositories.motel_repo_sql import MotelRepoSQL
from motel_booking.infrastructure.db.repositories.outbox_publisher_sql import (
    OutboxEventPublisherSQL,
)
from motel_booking.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from motel_booking.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from motel_booking.infrastructure.db.tables import outbox_events, reservations
from motel_booking.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager


@pytest.fixture
def sql_use_cases(sql_session, gateway, clock):
    return build_use_cases(
        motel_repo=MotelRepoSQL(sql_session),
        reservation_repo=ReservationRepoSQL(sql_session),
        payment_repo=PaymentRepoSQL(sql_session),
        payment_gateway=gateway,
        event_publisher=OutboxEventPublisherSQL(sql_session),
        tx_manager=SQLAlchemyTransactionManager(sql_session),
        clock=clock,
    )


@pytest_asyncio.fixture
async def sql_room(sql_use_cases):
    motel = await sql_use_cases["manage_motels"].create(
        name="Motel Sol",
        address=Address("Ruta 9 km 12", "Cordoba", "CBA", "5000", "AR"),
        owner_id=uuid4(),
    )
    return await sql_use_cases["manage_rooms"].add(
        motel_id=motel.id,
        room_number="12",
        name="Doce",
        capacity=2,
        price_per_hour=Decimal("75.00"),
        currency="USD",
    )


async def _book(use_cases, room, start, end):
    return await use_cases["create_reservation"].execute(
        motel_id=room.motel_id, room_id=room.id, user_id=uuid4(), start_time=start, end_time=end
    )


class TestSQLReservations:
    @pytest.mark.asyncio
    async def test_round_trip(self, sql_use_cases, sql_room, at):
        created = await _book(sql_use_cases, sql_room, at(10), at(12, 30))

        stored = await sql_use_cases["reservation_queries"].get(created.id)

        assert stored.total_amount == Money(Decimal("187.50"), "USD")
        assert stored.time_range == created.time_range
        assert stored.time_range.start.tzinfo is not None
        assert stored.status == ReservationStatus.PENDING

    @pytest.mark.asyncio
    async def test_confirm_rechecks_overlap_and_rolls_back(self, sql_use_cases, sql_room, sql_session, at):
        first = await _book(sql_use_cases, sql_room, at(10), at(12))
        second = await _book(sql_use_cases, sql_room, at(11), at(13))
        await sql_use_cases["confirm_reservation"].execute(first.id)

        with pytest.raises(BookingConflictError) as exc_info:
            await sql_use_cases["confirm_reservation"].execute(second.id)

        assert exc_info.value.conflicting_reservation_id == first.id
        stored = await sql_use_cases["reservation_queries"].get(second.id)
        assert stored.status == ReservationStatus.PENDING

    @pytest.mark.asyncio
    async def test_create_conflict_leaves_no_row(self, sql_use_cases, sql_room, sql_session, at):
        first = await _book(sql_use_cases, sql_room, at(10), at(12))
        await sql_use_cases["confirm_reservation"].execute(first.id)

        with pytest.raises(BookingConflictError):
            await _book(sql_use_cases, sql_room, at(9), at(11))

        count = await sql_session.scalar(select(func.count()).select_from(reservations))
        assert count == 1

    @pytest.mark.asyncio
    async def test_availability_and_queries(self, sql_use_cases, sql_room, at):
        booked = await _book(sql_use_cases, sql_room, at(10), at(12))
        await sql_use_cases["confirm_reservation"].execute(booked.id)

        free = await sql_use_cases["check_availability"].execute(sql_room.motel_id, at(12), at(13))
        busy = await sql_use_cases["check_availability"].execute(sql_room.motel_id, at(11), at(13))

        assert [room.id for room in free] == [sql_room.id]
        assert busy == []
        by_room = await sql_use_cases["reservation_queries"].by_room(sql_room.id)
        assert [r.id for r in by_room] == [booked.id]

    @pytest.mark.asyncio
    async def test_motel_with_reservations_cannot_be_deleted(self, sql_use_cases, sql_room, at):
        await _book(sql_use_cases, sql_room, at(10), at(12))

        with pytest.raises(BusinessRuleViolationError):
            await sql_use_cases["manage_motels"].delete(sql_room.motel_id)


class TestSQLPayments:
    @pytest.mark.asyncio
    async def test_payment_flow_writes_outbox(self, sql_use_cases, sql_room, sql_session, gateway, at):
        reservation = await _book(sql_use_cases, sql_room, at(10), at(13))
        payment = await sql_use_cases["create_payment"].execute(reservation.id, "visa")
        gateway.assign_ids("abc123")

        processed = await sql_use_cases["process_payment"].execute(payment.id)

        assert processed.status == PaymentStatus.APPROVED
        assert processed.amount == Money(Decimal("225.00"), "USD")
        stored = await sql_use_cases["reservation_queries"].get(reservation.id)
        assert stored.status == ReservationStatus.CONFIRMED
        assert stored.payment_id == payment.id

        rows = await sql_session.execute(select(outbox_events.c.event_type).order_by(outbox_events.c.id))
        assert [row.event_type for row in rows] == [
            "ReservationCreated",
            "PaymentApproved",
            "ReservationConfirmed",
        ]

    @pytest.mark.asyncio
    async def test_webhook_resolves_by_transaction_id(self, sql_use_cases, sql_room, gateway, at):
        reservation = await _book(sql_use_cases, sql_room, at(10), at(13))
        payment = await sql_use_cases["create_payment"].execute(reservation.id, "oxxo")
        gateway.assign_ids("mp-55")
        gateway.script("pending")
        await sql_use_cases["process_payment"].execute(payment.id)

        outcome = await sql_use_cases["handle_webhook"].reconcile("mp-55", "approved")

        assert outcome == "applied"
        stored = await sql_use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.APPROVED
        by_status = await sql_use_cases["payment_queries"].by_status(PaymentStatus.APPROVED)
        assert [p.id for p in by_status] == [payment.id]

    @pytest.mark.asyncio
    async def test_gateway_calls_run_outside_a_transaction(self, sql_use_cases, sql_room, sql_session, gateway, at):
        reservation = await _book(sql_use_cases, sql_room, at(10), at(13))
        payment = await sql_use_cases["create_payment"].execute(reservation.id, "visa")
        await sql_session.execute(select(func.count()).select_from(reservations))
        seen = []

        async def record(*_):
            seen.append(sql_session.in_transaction())

        gateway.on_charge = record
        gateway.on_refund = record

        await sql_use_cases["process_payment"].execute(payment.id)
        await sql_session.execute(select(func.count()).select_from(reservations))
        refunded = await sql_use_cases["refund_payment"].execute(payment.id)

        assert seen == [False, False]
        assert refunded.status == PaymentStatus.REFUNDED

    @pytest.mark.asyncio
    async def test_stale_update_is_refused(self, sql_use_cases, sql_room, sql_session, at):
        reservation = await _book(sql_use_cases, sql_room, at(10), at(13))
        payment = await sql_use_cases["create_payment"].execute(reservation.id, "visa")
        await sql_use_cases["process_payment"].execute(payment.id)
        repo = PaymentRepoSQL(sql_session)
        stale = await repo.get_by_id(payment.id)
        stale.status = PaymentStatus.FAILED

        with pytest.raises(StaleStateError):
            await repo.update(stale, expected_status=PaymentStatus.PROCESSING)
        await sql_session.rollback()

        stored = await sql_use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.APPROVED

    @pytest.mark.asyncio
    async def test_payment_queries_by_user_and_creation_window(self, sql_use_cases, sql_room, at):
        reservation = await _book(sql_use_cases, sql_room, at(10), at(13))
        payment = await sql_use_cases["pay_reservation"].execute(reservation.id, "visa")
        queries = sql_use_cases["payment_queries"]

        assert [p.id for p in await queries.by_user(reservation.user_id)] == [payment.id]
        assert await queries.by_user(uuid4()) == []
        assert [p.id for p in await queries.created_between(at(7), at(9))] == [payment.id]
        assert await queries.created_between(at(9), at(10)) == []
