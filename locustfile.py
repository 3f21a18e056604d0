import os
import random
import uuid
from datetime import datetime, timedelta, timezone

from locust import HttpUser, between, task

# Seeded ids (see scripts/seed_db.py); every user hammers the same rooms so
# overlapping bookings race for the same windows.
MOTEL_ID = os.environ["LOAD_MOTEL_ID"]
ROOM_IDS = os.environ["LOAD_ROOM_IDS"].split(",")


class BookingUser(HttpUser):
    wait_time = between(1, 3)

    def on_start(self):
        self.user_id = str(uuid.uuid4())
        self.base = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0) + timedelta(days=1)

    @task(3)
    def book_and_pay(self):
        start = self.base + timedelta(hours=random.randint(0, 48))
        with self.client.post(
            "/api/v1/reservations",
            json={
                "motel_id": MOTEL_ID,
                "room_id": random.choice(ROOM_IDS),
                "user_id": self.user_id,
                "start_time": start.isoformat(),
                "end_time": (start + timedelta(hours=random.randint(1, 4))).isoformat(),
            },
            name="/api/v1/reservations",
            catch_response=True,
        ) as response:
            if response.status_code == 409:
                # Lost the race for the window; expected under load.
                response.success()
                return
            if response.status_code != 201:
                return
            reservation_id = response.json()["id"]

        payment = self.client.post(
            "/api/v1/payments",
            json={"reservation_id": reservation_id, "payment_method": "visa"},
            name="/api/v1/payments",
        )
        if payment.status_code == 201:
            self.client.post(
                f"/api/v1/payments/{payment.json()['id']}/process",
                name="/api/v1/payments/[id]/process",
            )

    @task(1)
    def search(self):
        start = self.base + timedelta(hours=random.randint(0, 48))
        self.client.get(
            f"/api/v1/motels/{MOTEL_ID}/availability",
            params={"start_time": start.isoformat(), "end_time": (start + timedelta(hours=2)).isoformat()},
            name="/api/v1/motels/[id]/availability",
        )
