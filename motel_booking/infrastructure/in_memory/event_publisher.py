from typing import Sequence

from motel_booking.application.interfaces.event_publisher import EventPublisher
from motel_booking.domain.events import DomainEvent


class InMemoryEventPublisher(EventPublisher):
    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        self.events.extend(events)

    def of_type(self, event_type: type[DomainEvent]) -> list[DomainEvent]:
        return [event for event in self.events if isinstance(event, event_type)]
