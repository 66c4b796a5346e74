"""
Storage protocol consumed by the scheduling core.

Using a Protocol means the core doesn't know or care whether it's talking
to MySQL, SQLite or an in-memory dict. Any backend that honours the
contract below is substitutable, provided insert_booking_atomic keeps the
one mandatory capability: an atomic insert guarded by a uniqueness
constraint on (coach_id, start).
"""

from datetime import datetime
from typing import Optional, Protocol

from .models import AvailabilityWindow, Booking, Coach, LocalTime


class SchedulingStore(Protocol):
    """
    Persistence operations the core relies on.

    All instants crossing this boundary are timezone-aware UTC datetimes.
    Backends raise StorageError for driver failures.
    """

    def insert_coach(self, name: str, timezone_name: str) -> Coach:
        ...

    def lookup_coach_timezone(self, coach_id: int) -> Optional[str]:
        """Return the coach's IANA zone name, or None if no such coach."""
        ...

    def insert_availability(
        self,
        coach_id: int,
        weekday: int,
        start: LocalTime,
        end: LocalTime,
    ) -> AvailabilityWindow:
        ...

    def windows_for(self, coach_id: int, weekday: int) -> list[AvailabilityWindow]:
        """Windows for one coach/weekday in creation order."""
        ...

    def bookings_in_range(
        self,
        coach_id: int,
        start: datetime,
        end: datetime,
    ) -> set[datetime]:
        """Start instants of bookings with start in [start, end)."""
        ...

    def insert_booking_atomic(
        self,
        user_id: int,
        coach_id: int,
        start: datetime,
        end: datetime,
    ) -> Booking:
        """
        Insert a booking in a single transaction.

        Raises SlotConflictError if (coach_id, start) is already taken,
        StorageError for any other failure. Never leaves a partial row.
        """
        ...

    def delete_booking(self, booking_id: int) -> int:
        """Delete by id and return the number of rows affected."""
        ...

    def bookings_for_user(self, user_id: int, from_instant: datetime) -> list[Booking]:
        """Bookings with start >= from_instant, ascending by start."""
        ...

    def ping(self) -> None:
        """Raise StorageError if the backend cannot serve requests."""
        ...
