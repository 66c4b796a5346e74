"""
In-memory scheduling store for local development and tests.

Implements the same SchedulingStore protocol as the SQL repository,
including the atomic unique-insert contract for bookings. Data lives in
plain dicts and disappears with the process.

Not suitable for production, but perfect for:
- Local development without a database
- Unit tests
- CI/CD environments
"""

import itertools
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from ...core.scheduling.errors import SlotConflictError
from ...core.scheduling.models import AvailabilityWindow, Booking, Coach, LocalTime

logger = logging.getLogger(__name__)


class InMemorySchedulingStore:
    """
    Dict-backed SchedulingStore.

    A single mutex plays the role of the database's transaction and
    unique key: (coach_id, start) is checked and claimed under it, so
    concurrent inserts of the same slot admit exactly one caller.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._coaches: dict[int, Coach] = {}
        self._windows: dict[int, AvailabilityWindow] = {}
        self._bookings: dict[int, Booking] = {}
        # Unique index: (coach_id, start) -> booking id
        self._booked_starts: dict[tuple[int, datetime], int] = {}
        self._coach_ids = itertools.count(1)
        self._window_ids = itertools.count(1)
        self._booking_ids = itertools.count(1)

        logger.info("Initialized in-memory scheduling store")

    def insert_coach(self, name: str, timezone_name: str) -> Coach:
        with self._lock:
            coach = Coach(id=next(self._coach_ids), name=name, timezone=timezone_name)
            self._coaches[coach.id] = coach
        return coach

    def lookup_coach_timezone(self, coach_id: int) -> Optional[str]:
        coach = self._coaches.get(coach_id)
        return coach.timezone if coach else None

    def insert_availability(
        self,
        coach_id: int,
        weekday: int,
        start: LocalTime,
        end: LocalTime,
    ) -> AvailabilityWindow:
        with self._lock:
            window = AvailabilityWindow(
                id=next(self._window_ids),
                coach_id=coach_id,
                weekday=weekday,
                start=start,
                end=end,
            )
            self._windows[window.id] = window
        return window

    def windows_for(self, coach_id: int, weekday: int) -> list[AvailabilityWindow]:
        with self._lock:
            windows = list(self._windows.values())
        return sorted(
            (w for w in windows if w.coach_id == coach_id and w.weekday == weekday),
            key=lambda w: w.id,
        )

    def bookings_in_range(
        self,
        coach_id: int,
        start: datetime,
        end: datetime,
    ) -> set[datetime]:
        with self._lock:
            keys = list(self._booked_starts)
        return {
            booked_start
            for booked_coach, booked_start in keys
            if booked_coach == coach_id and start <= booked_start < end
        }

    def insert_booking_atomic(
        self,
        user_id: int,
        coach_id: int,
        start: datetime,
        end: datetime,
    ) -> Booking:
        start = start.astimezone(timezone.utc)
        key = (coach_id, start)
        with self._lock:
            if key in self._booked_starts:
                raise SlotConflictError("slot already booked")
            booking = Booking(
                id=next(self._booking_ids),
                user_id=user_id,
                coach_id=coach_id,
                start=start,
                end=end.astimezone(timezone.utc),
            )
            self._bookings[booking.id] = booking
            self._booked_starts[key] = booking.id
        return booking

    def delete_booking(self, booking_id: int) -> int:
        with self._lock:
            booking = self._bookings.pop(booking_id, None)
            if booking is None:
                return 0
            self._booked_starts.pop((booking.coach_id, booking.start), None)
        return 1

    def bookings_for_user(self, user_id: int, from_instant: datetime) -> list[Booking]:
        with self._lock:
            candidates = list(self._bookings.values())
        return sorted(
            (b for b in candidates if b.user_id == user_id and b.start >= from_instant),
            key=lambda b: (b.start, b.id),
        )

    def ping(self) -> None:
        return None
