import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from motel_booking.application.interfaces.event_publisher import EventPublisher
from motel_booking.domain.events import DomainEvent
from motel_booking.infrastructure.db.tables import outbox_events

logger = logging.getLogger(__name__)


class OutboxEventPublisherSQL(EventPublisher):
    """Writes events to the outbox table inside the caller's transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        if not events:
            return
        now = datetime.now(timezone.utc)
        await self._session.execute(
            insert(outbox_events),
            [
                {
                    "event_type": event.event_type,
                    "aggregate_type": event.aggregate_type,
                    "aggregate_id": str(event.aggregate_id),
                    "payload": event.to_payload(),
                    "status": "NEW",
                    "created_at": now,
                }
                for event in events
            ],
        )
        logger.debug(
            "Events enqueued in outbox",
            extra={"event_types": [event.event_type for event in events]},
        )
