"""End-to-end HTTP tests over the in-memory bundle."""

from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import OperationalError

from motel_booking.api.deps import get_db_session
from motel_booking.api.dependencies import in_memory_bundle
from motel_booking.domain.value_objects.money import Money

START = "2099-03-01T10:00:00Z"
END = "2099-03-01T12:00:00Z"


@pytest.fixture
def motel_id(client):
    response = client.post(
        "/api/v1/motels",
        json={
            "name": "Motel Luna",
            "owner_id": str(uuid4()),
            "email": "front@luna.example.com",
            "address": {
                "street": "Av. Siempre Viva 742",
                "city": "Springfield",
                "state": "IL",
                "zip_code": "62704",
                "country": "US",
            },
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


@pytest.fixture
def room_id(client, motel_id):
    response = client.post(
        f"/api/v1/motels/{motel_id}/rooms",
        json={"room_number": "101", "name": "Room R", "capacity": 2, "price_per_hour": "50.00"},
    )
    assert response.status_code == 201, response.text
    assert response.json()["currency"] == "USD"
    return response.json()["id"]


def _reserve(client, motel_id, room_id, start=START, end=END):
    return client.post(
        "/api/v1/reservations",
        json={
            "motel_id": motel_id,
            "room_id": room_id,
            "user_id": str(uuid4()),
            "start_time": start,
            "end_time": end,
        },
    )


class TestMotelEndpoints:
    def test_crud(self, client, motel_id):
        assert client.get(f"/api/v1/motels/{motel_id}").json()["name"] == "Motel Luna"

        patched = client.patch(f"/api/v1/motels/{motel_id}", json={"description": "Open 24h"})
        assert patched.status_code == 200
        assert patched.json()["description"] == "Open 24h"

        assert client.delete(f"/api/v1/motels/{motel_id}").status_code == 204
        missing = client.get(f"/api/v1/motels/{motel_id}")
        assert missing.status_code == 404
        assert missing.json()["kind"] == "NOT_FOUND"

    def test_invalid_payload_is_422(self, client):
        response = client.post("/api/v1/motels", json={"name": "", "unexpected": True})
        assert response.status_code == 422

    def test_duplicate_room_number_is_409(self, client, motel_id, room_id):
        response = client.post(
            f"/api/v1/motels/{motel_id}/rooms",
            json={"room_number": "101", "name": "Copy", "capacity": 2, "price_per_hour": "10"},
        )
        assert response.status_code == 409
        assert response.json()["context"]["rule"] == "UNIQUE_ROOM_NUMBER"

    def test_availability(self, client, motel_id, room_id):
        response = client.get(
            f"/api/v1/motels/{motel_id}/availability",
            params={"start_time": START, "end_time": END},
        )
        assert [room["id"] for room in response.json()["rooms"]] == [room_id]
        assert Decimal(response.json()["rooms"][0]["total_price"]) == Decimal("100.00")

        client.put(f"/api/v1/motels/{motel_id}/rooms/{room_id}/availability", json={"is_available": False})
        single = client.get(
            f"/api/v1/motels/{motel_id}/rooms/{room_id}/availability",
            params={"start_time": START, "end_time": END},
        )
        assert single.json()["available"] is False


class TestReservationEndpoints:
    def test_create_and_conflict(self, client, motel_id, room_id):
        created = _reserve(client, motel_id, room_id)
        assert created.status_code == 201, created.text
        body = created.json()
        assert body["status"] == "PENDING"
        assert Decimal(body["total_amount"]) == Decimal("100.00")

        confirmed = client.post(f"/api/v1/reservations/{body['id']}/confirm")
        assert confirmed.json()["status"] == "CONFIRMED"

        conflict = _reserve(client, motel_id, room_id, "2099-03-01T11:00:00Z", "2099-03-01T13:00:00Z")
        assert conflict.status_code == 409
        assert conflict.json()["context"]["conflicting_reservation_id"] == body["id"]

        touching = _reserve(client, motel_id, room_id, END, "2099-03-01T14:00:00Z")
        assert touching.status_code == 201

    def test_inverted_window_is_400(self, client, motel_id, room_id):
        response = _reserve(client, motel_id, room_id, END, START)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TIME"

    def test_invalid_transition_is_400(self, client, motel_id, room_id):
        reservation_id = _reserve(client, motel_id, room_id).json()["id"]

        response = client.post(f"/api/v1/reservations/{reservation_id}/check-out")

        assert response.status_code == 400
        assert response.json()["context"]["current_status"] == "PENDING"

    def test_lists(self, client, motel_id, room_id):
        reservation = _reserve(client, motel_id, room_id).json()

        by_user = client.get("/api/v1/reservations", params={"user_id": reservation["user_id"]})
        by_motel = client.get(f"/api/v1/motels/{motel_id}/reservations")
        by_room = client.get(f"/api/v1/rooms/{room_id}/reservations")

        for response in (by_user, by_motel, by_room):
            assert [r["id"] for r in response.json()] == [reservation["id"]]

    def test_unknown_reservation_is_404(self, client):
        assert client.get(f"/api/v1/reservations/{uuid4()}").status_code == 404


class TestPaymentEndpoints:
    def test_pay_and_refund(self, client, motel_id, room_id):
        reservation_id = _reserve(client, motel_id, room_id).json()["id"]

        payment = client.post(
            "/api/v1/payments", json={"reservation_id": reservation_id, "payment_method": "visa"}
        )
        assert payment.status_code == 201, payment.text
        payment_id = payment.json()["id"]

        processed = client.post(
            f"/api/v1/payments/{payment_id}/process",
            json={"payer": {"email": "ana@example.com", "first_name": "Ana", "last_name": "Diaz"}},
        )
        assert processed.json()["status"] == "APPROVED"
        assert client.get(f"/api/v1/reservations/{reservation_id}").json()["status"] == "CONFIRMED"

        refunded = client.post(f"/api/v1/payments/{payment_id}/refund")
        assert refunded.json()["status"] == "REFUNDED"
        assert client.get(f"/api/v1/reservations/{reservation_id}").json()["status"] == "CANCELLED"

        listed = client.get("/api/v1/payments", params={"reservation_id": reservation_id})
        assert [p["id"] for p in listed.json()] == [payment_id]

    def test_gateway_failure_is_502(self, client, motel_id, room_id):
        reservation_id = _reserve(client, motel_id, room_id).json()["id"]
        payment_id = client.post(
            "/api/v1/payments", json={"reservation_id": reservation_id, "payment_method": "visa"}
        ).json()["id"]
        in_memory_bundle()["payment_gateway"].script(TimeoutError("gateway timed out"))

        response = client.post(f"/api/v1/payments/{payment_id}/process")

        assert response.status_code == 502
        assert client.get(f"/api/v1/payments/{payment_id}").json()["status"] == "FAILED"

    def test_amount_mismatch_is_opaque_500(self, client, motel_id, room_id):
        reservation_id = _reserve(client, motel_id, room_id).json()["id"]
        payment_id = client.post(
            "/api/v1/payments", json={"reservation_id": reservation_id, "payment_method": "visa"}
        ).json()["id"]
        in_memory_bundle()["payment_repo"].payments[UUID(payment_id)].amount = Money(Decimal("1"), "USD")

        response = client.post(f"/api/v1/payments/{payment_id}/process")

        assert response.status_code == 500
        assert "error_id" in response.json()
        assert "context" not in response.json()

    def test_list_requires_filter(self, client):
        assert client.get("/api/v1/payments").status_code == 400

    def test_pay_reservation_in_one_step(self, client, motel_id, room_id):
        reservation = _reserve(client, motel_id, room_id).json()

        paid = client.post(
            f"/api/v1/reservations/{reservation['id']}/pay", json={"payment_method": "visa"}
        )

        assert paid.status_code == 201, paid.text
        assert paid.json()["status"] == "APPROVED"
        assert Decimal(paid.json()["amount"]) == Decimal("100.00")
        assert client.get(f"/api/v1/reservations/{reservation['id']}").json()["status"] == "CONFIRMED"

        by_user = client.get(f"/api/v1/payments/user/{reservation['user_id']}")
        assert [p["id"] for p in by_user.json()] == [paid.json()["id"]]
        assert client.get(f"/api/v1/payments/user/{uuid4()}").json() == []

        in_range = client.get(
            "/api/v1/payments/date-range",
            params={"start_date": "2000-01-01T00:00:00Z", "end_date": "2100-01-01T00:00:00Z"},
        )
        assert [p["id"] for p in in_range.json()] == [paid.json()["id"]]

    def test_inverted_date_range_is_400(self, client):
        response = client.get(
            "/api/v1/payments/date-range",
            params={"start_date": "2030-01-02T00:00:00Z", "end_date": "2030-01-01T00:00:00Z"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TIME"


class TestWebhookEndpoint:
    def test_notification_is_applied_and_replay_is_noop(self, client, motel_id, room_id):
        reservation_id = _reserve(client, motel_id, room_id).json()["id"]
        payment_id = client.post(
            "/api/v1/payments", json={"reservation_id": reservation_id, "payment_method": "oxxo"}
        ).json()["id"]
        gateway = in_memory_bundle()["payment_gateway"]
        gateway.assign_ids("555")
        gateway.script("pending")
        client.post(f"/api/v1/payments/{payment_id}/process")
        gateway.set_status("555", "approved", "accredited")
        notification = {"type": "payment", "action": "payment.updated", "data": {"id": "555"}}

        first = client.post("/api/v1/webhooks/mercadopago", json=notification)
        second = client.post("/api/v1/webhooks/mercadopago", json=notification)

        assert first.json() == {"status": "applied"}
        assert second.json() == {"status": "unchanged"}
        assert client.get(f"/api/v1/payments/{payment_id}").json()["status"] == "APPROVED"

    def test_legacy_query_string_notification(self, client):
        response = client.post("/api/v1/webhooks/mercadopago?topic=payment&id=999")
        assert response.status_code == 200
        assert response.json() == {"status": "discarded"}

    def test_malformed_body_is_acknowledged(self, client):
        response = client.post(
            "/api/v1/webhooks/mercadopago",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert response.json() == {"status": "discarded"}

    def test_other_topics_are_ignored(self, client):
        response = client.post("/api/v1/webhooks/mercadopago", json={"type": "merchant_order", "data": {"id": "1"}})
        assert response.json() == {"status": "ignored"}


class TestWorkerEndpoint:
    def test_sweep_with_nothing_due(self, client):
        response = client.post("/api/v1/workers/no-shows", params={"limit": 10})
        assert response.status_code == 200
        assert response.json() == {"marked": 0, "reservation_ids": []}

    def test_limit_is_validated(self, client):
        assert client.post("/api/v1/workers/no-shows", params={"limit": 0}).status_code == 422


class TestHealthEndpoints:
    def test_liveness(self, client):
        for path in ("/health", "/health/live"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json()["status"] == "ok"

    def test_database_checks(self, client):
        assert client.get("/health/db").json() == {"status": "healthy", "component": "database"}
        assert client.get("/health/ready").json()["status"] == "ready"

    def test_database_down_is_503(self, client):
        class BrokenSession:
            async def execute(self, *args, **kwargs):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        async def broken_session():
            yield BrokenSession()

        client.app.dependency_overrides[get_db_session] = broken_session
        try:
            db = client.get("/health/db")
            ready = client.get("/health/ready")
        finally:
            client.app.dependency_overrides.clear()

        assert db.status_code == 503
        assert ready.json() == {"status": "not_ready", "checks": {"database": "unhealthy"}}
