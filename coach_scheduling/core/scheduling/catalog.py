"""
Read access to coaches' recurring weekly availability.
"""

import logging

from .models import AvailabilityWindow, LocalTime, validate_weekday
from .errors import MalformedInputError
from .storage import SchedulingStore

logger = logging.getLogger(__name__)


class AvailabilityCatalog:
    """
    Availability windows for a coach, keyed by weekday.

    Stateless apart from the injected store: every call goes back to
    storage, so results always reflect the latest committed data.
    """

    def __init__(self, store: SchedulingStore) -> None:
        self._store = store

    def windows_for(self, coach_id: int, weekday: int) -> list[AvailabilityWindow]:
        """All windows for coach/weekday, in creation order."""
        validate_weekday(weekday)
        return self._store.windows_for(coach_id, weekday)

    def add_window(
        self,
        coach_id: int,
        weekday: int,
        start: str,
        end: str,
    ) -> AvailabilityWindow:
        """
        Validate and store a new window.

        Times are "HH:MM" strings in the coach's own timezone. They are
        parsed here once and travel as LocalTime from then on.
        """
        validate_weekday(weekday)
        start_time = LocalTime.parse(start, "start_time")
        end_time = LocalTime.parse(end, "end_time")
        if not start_time < end_time:
            raise MalformedInputError("start_time must be before end_time")

        window = self._store.insert_availability(coach_id, weekday, start_time, end_time)

        logger.info(
            "Availability window added",
            extra={
                "coach_id": coach_id,
                "window_id": window.id,
                "weekday": weekday,
                "start": str(start_time),
                "end": str(end_time),
            }
        )
        return window
