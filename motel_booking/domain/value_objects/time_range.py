"""Value Object TimeRange - half-open booking window [start, end)."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from motel_booking.domain.errors import InvalidTimeRangeError

DEFAULT_CLOCK_SKEW = timedelta(minutes=5)
_SECONDS_PER_HOUR = Decimal(3600)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeRange:
    """
    Immutable half-open interval of time.

    Naive datetimes are taken as UTC. Construction only checks ordering, so
    stored reservations can be rehydrated after their window has passed; new
    bookings go through ``for_booking``, which also rejects past starts.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _as_utc(self.start))
        object.__setattr__(self, "end", _as_utc(self.end))
        if self.start >= self.end:
            raise InvalidTimeRangeError(
                self.start, self.end, "start time must be before end time"
            )

    @classmethod
    def for_booking(
        cls,
        start: datetime,
        end: datetime,
        now: datetime,
        clock_skew: timedelta = DEFAULT_CLOCK_SKEW,
    ) -> "TimeRange":
        """Build a range for a new booking, rejecting starts in the past."""
        time_range = cls(start=start, end=end)
        if time_range.start < _as_utc(now) - clock_skew:
            raise InvalidTimeRangeError(
                time_range.start, time_range.end, "start time cannot be in the past"
            )
        return time_range

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def hours(self) -> Decimal:
        """Exact duration in (possibly fractional) hours."""
        duration = self.duration
        seconds = Decimal(duration.days * 86400 + duration.seconds) + (
            Decimal(duration.microseconds) / Decimal(1_000_000)
        )
        return seconds / _SECONDS_PER_HOUR

    def overlaps(self, other: "TimeRange") -> bool:
        """Touching endpoints do not overlap."""
        return self.start < other.end and self.end > other.start

    def contains(self, moment: datetime) -> bool:
        moment = _as_utc(moment)
        return self.start <= moment < self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"
