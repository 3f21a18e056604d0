from uuid import uuid4

import pytest

from motel_booking.application.use_cases.handle_payment_webhook import (
    OUTCOME_APPLIED,
    OUTCOME_DISCARDED,
    OUTCOME_IGNORED,
    OUTCOME_UNCHANGED,
)
from motel_booking.domain.entities.payment import PaymentStatus
from motel_booking.domain.entities.reservation import ReservationStatus
from motel_booking.domain.events import PaymentApproved, PaymentRefunded, ReservationConfirmed


@pytest.fixture
def created_payment(use_cases, motel, suite, at):
    async def _created():
        reservation = await use_cases["create_reservation"].execute(
            motel_id=motel.id, room_id=suite.id, user_id=uuid4(), start_time=at(10), end_time=at(13)
        )
        return await use_cases["create_payment"].execute(reservation.id, "visa")

    return _created


@pytest.fixture
def pending_charge(use_cases, gateway, created_payment):
    """Payment left in PROCESSING with gateway id ``mp-1``."""

    async def _pending():
        payment = await created_payment()
        gateway.assign_ids("mp-1")
        gateway.script("in_process")
        return await use_cases["process_payment"].execute(payment.id)

    return _pending


class TestPaymentWebhook:
    @pytest.mark.asyncio
    async def test_approval_is_applied_once(self, use_cases, gateway, publisher, reservation_repo, pending_charge):
        payment = await pending_charge()
        gateway.set_status("mp-1", "approved", "accredited")
        webhook = use_cases["handle_webhook"]

        first = await webhook.execute("payment", "mp-1")
        second = await webhook.execute("payment", "mp-1")

        assert (first, second) == (OUTCOME_APPLIED, OUTCOME_UNCHANGED)
        stored = await use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.APPROVED
        reservation = await reservation_repo.get_by_id(payment.reservation_id)
        assert reservation.status == ReservationStatus.CONFIRMED
        assert len(publisher.of_type(PaymentApproved)) == 1
        assert len(publisher.of_type(ReservationConfirmed)) == 1

    @pytest.mark.asyncio
    async def test_replay_after_sync_approval_is_noop(self, use_cases, gateway, publisher, created_payment):
        payment = await created_payment()
        gateway.assign_ids("abc123")
        await use_cases["process_payment"].execute(payment.id)

        outcome = await use_cases["handle_webhook"].execute("payment", "abc123")

        assert outcome == OUTCOME_UNCHANGED
        assert len(publisher.of_type(PaymentApproved)) == 1

    @pytest.mark.asyncio
    async def test_rejection_fails_payment(self, use_cases, gateway, pending_charge):
        payment = await pending_charge()
        gateway.set_status("mp-1", "rejected", "cc_rejected_high_risk")

        assert await use_cases["handle_webhook"].execute("payment", "mp-1") == OUTCOME_APPLIED

        stored = await use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.FAILED
        assert stored.failure_reason == "cc_rejected_high_risk"

    @pytest.mark.asyncio
    async def test_refund_before_approval_converges(self, use_cases, gateway, publisher, reservation_repo, pending_charge):
        payment = await pending_charge()
        gateway.set_status("mp-1", "refunded")

        assert await use_cases["handle_webhook"].execute("payment", "mp-1") == OUTCOME_APPLIED

        stored = await use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.REFUNDED
        assert gateway.refund_calls == []
        assert len(publisher.of_type(PaymentRefunded)) == 1
        reservation = await reservation_repo.get_by_id(payment.reservation_id)
        assert reservation.status == ReservationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_late_approval_after_refund_is_discarded(self, use_cases, pending_charge):
        payment = await pending_charge()
        webhook = use_cases["handle_webhook"]
        await webhook.reconcile("mp-1", "refunded", external_reference=str(payment.id))

        outcome = await webhook.reconcile("mp-1", "approved", external_reference=str(payment.id))

        assert outcome == OUTCOME_DISCARDED
        stored = await use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.REFUNDED

    @pytest.mark.asyncio
    async def test_resolves_created_payment_by_external_reference(self, use_cases, created_payment):
        payment = await created_payment()

        outcome = await use_cases["handle_webhook"].reconcile(
            "mp-9", "approved", "accredited", external_reference=str(payment.id)
        )

        assert outcome == OUTCOME_APPLIED
        stored = await use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.APPROVED
        assert stored.transaction_id == "mp-9"

    @pytest.mark.asyncio
    async def test_rejection_of_created_payment_is_discarded(self, use_cases, created_payment):
        payment = await created_payment()

        outcome = await use_cases["handle_webhook"].reconcile(
            "mp-9", "rejected", external_reference=str(payment.id)
        )

        assert outcome == OUTCOME_DISCARDED
        stored = await use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.CREATED

    @pytest.mark.asyncio
    async def test_unknown_payment_is_discarded(self, use_cases):
        outcome = await use_cases["handle_webhook"].reconcile(
            "mp-404", "approved", external_reference="not-a-uuid"
        )
        assert outcome == OUTCOME_DISCARDED

    @pytest.mark.asyncio
    async def test_gateway_fetch_failure_is_discarded(self, use_cases):
        assert await use_cases["handle_webhook"].execute("payment", "missing") == OUTCOME_DISCARDED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("notification_type, external_id", [("merchant_order", "1"), ("payment", None)])
    async def test_other_notifications_are_ignored(self, use_cases, notification_type, external_id):
        assert await use_cases["handle_webhook"].execute(notification_type, external_id) == OUTCOME_IGNORED

    @pytest.mark.asyncio
    async def test_in_flight_status_is_ignored(self, use_cases, gateway, pending_charge):
        payment = await pending_charge()

        assert await use_cases["handle_webhook"].execute("payment", "mp-1") == OUTCOME_IGNORED

        stored = await use_cases["payment_queries"].get(payment.id)
        assert stored.status == PaymentStatus.PROCESSING
