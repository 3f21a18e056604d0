from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """Stores UTC, always hands back timezone-aware UTC values."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


metadata = MetaData()

motels = Table(
    "motels",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(200), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("street", String(255), nullable=False),
    Column("city", String(100), nullable=False),
    Column("state", String(100), nullable=False),
    Column("zip_code", String(20), nullable=False),
    Column("country", String(100), nullable=False),
    Column("phone_number", String(50), nullable=False, default=""),
    Column("email", String(255), nullable=False, default=""),
    Column("owner_id", String(36), nullable=False, index=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("image_url", String(500)),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
)

rooms = Table(
    "rooms",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("motel_id", String(36), ForeignKey("motels.id", ondelete="CASCADE"), nullable=False),
    Column("room_number", String(20), nullable=False),
    Column("name", String(200), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("room_type", String(16), nullable=False),
    Column("capacity", Integer, nullable=False),
    Column("price_per_hour", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("is_available", Boolean, nullable=False, default=True),
    Column("image_url", String(500)),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    UniqueConstraint("motel_id", "room_number", name="uq_rooms_motel_room_number"),
)

reservations = Table(
    "reservations",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("motel_id", String(36), ForeignKey("motels.id"), nullable=False, index=True),
    Column("room_id", String(36), ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False),
    Column("user_id", String(36), nullable=False, index=True),
    Column("start_time", UTCDateTime, nullable=False),
    Column("end_time", UTCDateTime, nullable=False),
    Column("status", String(16), nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("payment_id", String(36)),
    Column("special_requests", Text),
    Column("check_in_time", UTCDateTime),
    Column("check_out_time", UTCDateTime),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    Index("ix_reservations_room_window", "room_id", "start_time", "end_time"),
)

payments = Table(
    "payments",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "reservation_id",
        String(36),
        ForeignKey("reservations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    ),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("status", String(16), nullable=False),
    Column("payment_method", String(50), nullable=False),
    Column("transaction_id", String(64), index=True),
    Column("failure_reason", String(500)),
    Column("processed_at", UTCDateTime),
    Column("refund_reconciliation_required", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
)

outbox_events = Table(
    "outbox_events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_type", String(64), nullable=False),
    Column("aggregate_type", String(32), nullable=False),
    Column("aggregate_id", String(36), nullable=False),
    Column("payload", JSON, nullable=False),
    Column("status", String(16), nullable=False, default="NEW"),
    Column("created_at", UTCDateTime),
)
