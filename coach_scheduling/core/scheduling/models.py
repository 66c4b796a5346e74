"""
Domain models for coach scheduling.

These models represent the core business concepts. They have no dependencies
on FastAPI, SQLAlchemy or any storage engine; repositories translate rows
into these types at the boundary.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from .errors import MalformedInputError


# Fixed slot length. Bookings always span exactly one slot.
SLOT_DURATION = timedelta(minutes=30)

# Weekday numbering used everywhere: 0=Sunday .. 6=Saturday
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

_LOCAL_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_weekday(weekday: int) -> int:
    """Reject anything outside 0..6."""
    if isinstance(weekday, bool) or not isinstance(weekday, int) or not 0 <= weekday <= 6:
        raise MalformedInputError("day must be 0..6 (0=Sunday)")
    return weekday


@dataclass(frozen=True, order=True)
class LocalTime:
    """
    A wall-clock time of day with minute precision.

    Frozen and ordered because it's a value: two 09:00s are the same
    09:00, and comparison is chronological within a day.
    """
    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise MalformedInputError(f"invalid local time {self.hour}:{self.minute}")

    @classmethod
    def parse(cls, value: str, field_name: str = "time") -> "LocalTime":
        """Parse a strict two-digit "HH:MM" string."""
        match = _LOCAL_TIME_PATTERN.match(value or "")
        if not match:
            raise MalformedInputError(f"{field_name} must be HH:MM")
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class Coach:
    id: int
    name: str
    timezone: str


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    A recurring weekly interval during which a coach accepts bookings.

    Multiple windows per (coach, weekday) are allowed and are never
    merged, even when they overlap.
    """
    id: int
    coach_id: int
    weekday: int
    start: LocalTime
    end: LocalTime

    def __post_init__(self) -> None:
        validate_weekday(self.weekday)
        if not self.start < self.end:
            raise MalformedInputError("start_time must be before end_time")


@dataclass(frozen=True)
class Booking:
    """A confirmed reservation of one slot. All instants are UTC."""
    id: int
    user_id: int
    coach_id: int
    start: datetime
    end: datetime
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class SlotQuery:
    """Result of a slot query: the coach's zone plus open slot starts (UTC)."""
    coach_id: int
    local_date: date
    timezone: str
    slots: list[datetime] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.slots)

    def first(self) -> Optional[datetime]:
        return self.slots[0] if self.slots else None
