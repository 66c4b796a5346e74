"""
Scheduling service: the operations exposed to the transport layer.

This is the only entry point the HTTP routes use. It composes the
catalog, slot generator, ledger and validator around one injected store
and returns domain objects or raises SchedulingError subclasses. The
transport layer is responsible only for (de)serialization and mapping
error kinds to status codes.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

from .catalog import AvailabilityCatalog
from .errors import CoachNotFoundError, MalformedInputError, NotFoundError
from .ledger import BookingLedger
from .models import AvailabilityWindow, Booking, Coach, SlotQuery
from .slots import SlotGenerator
from .storage import SchedulingStore
from .timeconv import load_timezone, local_day_bounds, parse_local_date
from .validator import BookingValidator

logger = logging.getLogger(__name__)


class SchedulingService:
    """
    Coach availability, slot queries and bookings.

    Holds no state of its own beyond the store handle, so a fresh
    instance per request is as good as a shared one.
    """

    def __init__(self, store: SchedulingStore) -> None:
        self._store = store
        self.catalog = AvailabilityCatalog(store)
        self.slots = SlotGenerator(self.catalog)
        self.ledger = BookingLedger(store)
        self.validator = BookingValidator(store, self.catalog, self.ledger)

    # -----------------------------------------------------------------------
    # Coaches
    # -----------------------------------------------------------------------

    def create_coach(self, name: str, timezone_name: str) -> Coach:
        """Create a coach after checking the zone resolves."""
        load_timezone(timezone_name)
        coach = self._store.insert_coach(name, timezone_name)
        logger.info(
            "Coach created",
            extra={"coach_id": coach.id, "timezone": timezone_name}
        )
        return coach

    def add_availability(
        self,
        coach_id: int,
        weekday: int,
        start: str,
        end: str,
    ) -> AvailabilityWindow:
        """Add a recurring weekly window ("HH:MM" local times)."""
        self._coach_timezone(coach_id)
        return self.catalog.add_window(coach_id, weekday, start, end)

    # -----------------------------------------------------------------------
    # Slots
    # -----------------------------------------------------------------------

    def query_slots(self, coach_id: int, local_date: Union[date, str]) -> SlotQuery:
        """
        Open slots for a coach on a date in the coach's own timezone.

        Generated slots are filtered against bookings whose start falls
        on that local day. Duplicates from overlapping windows survive.
        """
        if isinstance(local_date, str):
            local_date = parse_local_date(local_date)

        tz_name = self._coach_timezone(coach_id)
        zone = load_timezone(tz_name)

        day_start, day_end = local_day_bounds(local_date, zone)
        candidates = list(self.slots.generate_slots(coach_id, local_date, zone))
        booked = self.ledger.bookings_in_range(coach_id, day_start, day_end)
        open_slots = [slot for slot in candidates if slot not in booked]

        logger.debug(
            "Slots computed",
            extra={
                "coach_id": coach_id,
                "date": local_date.isoformat(),
                "candidates": len(candidates),
                "booked": len(booked),
                "open": len(open_slots),
            }
        )
        return SlotQuery(
            coach_id=coach_id,
            local_date=local_date,
            timezone=tz_name,
            slots=open_slots,
        )

    # -----------------------------------------------------------------------
    # Bookings
    # -----------------------------------------------------------------------

    def create_booking(self, user_id: int, coach_id: int, requested: str) -> Booking:
        """Validate and reserve the slot starting at `requested` (RFC 3339)."""
        return self.validator.book(user_id, coach_id, requested)

    def list_user_bookings(
        self,
        user_id: int,
        from_instant: Optional[datetime] = None,
    ) -> list[Booking]:
        """Upcoming bookings for a user, earliest first."""
        if from_instant is None:
            from_instant = datetime.now(timezone.utc)
        elif from_instant.tzinfo is None:
            raise MalformedInputError("from_instant must be timezone-aware")
        return self.ledger.list_for_user(user_id, from_instant)

    def cancel_booking(self, booking_id: int) -> None:
        """Cancel a booking. Raises NotFoundError if it doesn't exist."""
        if not self.ledger.cancel(booking_id):
            raise NotFoundError("booking not found")

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _coach_timezone(self, coach_id: int) -> str:
        tz_name = self._store.lookup_coach_timezone(coach_id)
        if tz_name is None:
            raise CoachNotFoundError("coach not found")
        return tz_name
