"""
Slot generation.

Turns a coach's recurring local-time windows into concrete UTC slot
starts for one local calendar date.

Algorithm:
    1. Find the windows for weekday_of(local_date) in the coach's zone
    2. Anchor each window's start/end onto local_date and convert to UTC
    3. Walk forward in absolute 30-minute steps from the anchored start,
       emitting t while t + 30min <= anchored end

Stepping happens in UTC, not on the wall clock, so a window spanning a
DST transition yields the slots that really fit in it. A trailing
remainder shorter than one slot is dropped. Overlapping windows are
processed independently and can produce duplicate slots; they are passed
through as entered, not de-duplicated.
"""

from datetime import date, datetime
from typing import Iterator

from .catalog import AvailabilityCatalog
from .models import SLOT_DURATION, AvailabilityWindow
from .timeconv import TimezoneLike, local_wall_clock_to_utc, resolve_zone, weekday_of


def anchor_window(
    window: AvailabilityWindow,
    local_date: date,
    tz: TimezoneLike,
) -> tuple[datetime, datetime]:
    """UTC [start, end) of a window placed on a specific local date."""
    start = local_wall_clock_to_utc(local_date, window.start.hour, window.start.minute, tz)
    end = local_wall_clock_to_utc(local_date, window.end.hour, window.end.minute, tz)
    return start, end


def iter_window_slots(
    window: AvailabilityWindow,
    local_date: date,
    tz: TimezoneLike,
) -> Iterator[datetime]:
    """Slot starts (UTC) for a single window on local_date, chronological."""
    start, end = anchor_window(window, local_date, tz)
    slot = start
    while True:
        try:
            slot_end = slot + SLOT_DURATION
        except OverflowError:
            # Past datetime.max, so past end as well
            return
        if slot_end > end:
            return
        yield slot
        slot = slot_end


class SlotGenerator:
    """
    Enumerates candidate slots from availability.

    Knows nothing about bookings; filtering taken slots is the ledger's
    job. Nothing is cached.
    """

    def __init__(self, catalog: AvailabilityCatalog) -> None:
        self._catalog = catalog

    def generate_slots(
        self,
        coach_id: int,
        local_date: date,
        tz: TimezoneLike,
    ) -> Iterator[datetime]:
        """
        Lazily yield slot starts for coach on local_date.

        Order is window order (creation order), then chronological
        within each window. Calling again recomputes from storage.
        """
        zone = resolve_zone(tz)
        weekday = weekday_of(local_date, zone)
        for window in self._catalog.windows_for(coach_id, weekday):
            yield from iter_window_slots(window, local_date, zone)
