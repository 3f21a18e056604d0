from typing import Sequence

from motel_booking.domain.events import DomainEvent


class EventPublisher:
    async def publish(self, events: Sequence[DomainEvent]) -> None:
        raise NotImplementedError
