"""Clock port - abstraction over the system time."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Injectable source of the current time so tests can freeze it."""

    @abstractmethod
    def now(self) -> datetime:
        """Current instant, timezone-aware UTC."""
        raise NotImplementedError


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(Clock):
    """
    Fixed clock for deterministic tests.

    Naive times passed in are taken as UTC.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = _aware(fixed_time or datetime.now(timezone.utc))

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, new_time: datetime) -> None:
        self._fixed_time = _aware(new_time)

    def advance(self, seconds: int = 0, minutes: int = 0, hours: int = 0, days: int = 0) -> None:
        delta = timedelta(seconds=seconds, minutes=minutes, hours=hours, days=days)
        self._fixed_time = self._fixed_time + delta


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
