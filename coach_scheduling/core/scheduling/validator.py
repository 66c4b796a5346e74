"""
Booking validation and admission.

A single booking attempt moves through these states:

    RECEIVED -> TIME_PARSED -> BOUNDARY_CHECKED -> AVAILABILITY_CHECKED -> INSERTED

Any step can end in REJECTED instead of moving on.

Every check that can reject the request runs before the only mutating
call (the ledger insert), so a rejected attempt never leaves anything
behind.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Optional

from .catalog import AvailabilityCatalog
from .errors import (
    BoundaryViolationError,
    CoachNotFoundError,
    OutsideAvailabilityError,
    SchedulingError,
)
from .ledger import BookingLedger
from .models import SLOT_DURATION, AvailabilityWindow, Booking
from .slots import anchor_window
from .storage import SchedulingStore
from .timeconv import load_timezone, parse_instant, shift_instant, to_local, weekday_of

logger = logging.getLogger(__name__)


class AttemptState(Enum):
    RECEIVED = "received"
    TIME_PARSED = "time_parsed"
    BOUNDARY_CHECKED = "boundary_checked"
    AVAILABILITY_CHECKED = "availability_checked"
    INSERTED = "inserted"
    REJECTED = "rejected"


@dataclass
class BookingAttempt:
    """Progress of one booking request through validation."""
    user_id: int
    coach_id: int
    requested: str
    state: AttemptState = AttemptState.RECEIVED
    start: Optional[datetime] = None
    booking: Optional[Booking] = None
    error: Optional[SchedulingError] = None

    def advance(self, state: AttemptState) -> None:
        logger.debug(
            "Booking attempt transition",
            extra={
                "coach_id": self.coach_id,
                "user_id": self.user_id,
                "from_state": self.state.value,
                "to_state": state.value,
            }
        )
        self.state = state

    def reject(self, error: SchedulingError) -> None:
        self.error = error
        self.advance(AttemptState.REJECTED)


def is_on_slot_boundary(instant: datetime) -> bool:
    """True if the UTC minute is :00 or :30 with no seconds or sub-seconds."""
    utc = instant.astimezone(timezone.utc)
    return utc.minute % 30 == 0 and utc.second == 0 and utc.microsecond == 0


class BookingValidator:
    """
    Accepts or rejects booking requests.

    Slots are aligned in UTC regardless of the coach's offset. In a
    half-hour-offset zone a locally "on the hour" request may still be
    UTC-misaligned; it is rejected as such, not compensated for.
    """

    def __init__(
        self,
        store: SchedulingStore,
        catalog: Optional[AvailabilityCatalog] = None,
        ledger: Optional[BookingLedger] = None,
    ) -> None:
        self._store = store
        self._catalog = catalog or AvailabilityCatalog(store)
        self._ledger = ledger or BookingLedger(store)

    def book(self, user_id: int, coach_id: int, requested: str) -> Booking:
        """
        Validate a requested start and insert the booking.

        Raises:
            MalformedInputError: requested is not an absolute timestamp
            BoundaryViolationError: not on a 30-minute UTC mark
            CoachNotFoundError: unknown coach
            OutsideAvailabilityError: no window contains the slot
            SlotConflictError: already booked
            StorageError: backing-store failure
        """
        attempt = BookingAttempt(user_id=user_id, coach_id=coach_id, requested=requested)
        try:
            return self._run(attempt)
        except SchedulingError as e:
            attempt.reject(e)
            logger.info(
                "Booking rejected",
                extra={
                    "coach_id": coach_id,
                    "user_id": user_id,
                    "requested": requested,
                    "kind": e.kind.value,
                    "reason": e.reason,
                }
            )
            raise

    def _run(self, attempt: BookingAttempt) -> Booking:
        attempt.start = parse_instant(attempt.requested)
        attempt.advance(AttemptState.TIME_PARSED)

        if not is_on_slot_boundary(attempt.start):
            raise BoundaryViolationError(
                "slot must be on 30-minute boundary (minute 00 or 30)"
            )
        attempt.advance(AttemptState.BOUNDARY_CHECKED)

        tz_name = self._store.lookup_coach_timezone(attempt.coach_id)
        if tz_name is None:
            raise CoachNotFoundError("coach not found")
        self.check_availability(attempt.coach_id, attempt.start, load_timezone(tz_name))
        attempt.advance(AttemptState.AVAILABILITY_CHECKED)

        attempt.booking = self._ledger.try_insert(
            attempt.user_id,
            attempt.coach_id,
            attempt.start,
            shift_instant(attempt.start, SLOT_DURATION),
        )
        attempt.advance(AttemptState.INSERTED)
        return attempt.booking

    def check_availability(
        self,
        coach_id: int,
        start: datetime,
        zone: tzinfo,
    ) -> AvailabilityWindow:
        """
        Find a window on the requested local date that fully contains
        [start, start + 30min]. Returns the first match.
        """
        end = shift_instant(start, SLOT_DURATION)
        local_date = to_local(start, zone).date()
        weekday = weekday_of(local_date, zone)

        for window in self._catalog.windows_for(coach_id, weekday):
            window_start, window_end = anchor_window(window, local_date, zone)
            if start >= window_start and end <= window_end:
                return window

        raise OutsideAvailabilityError(
            "requested slot not within coach availability for that local date"
        )
