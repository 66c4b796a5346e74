"""
The booking ledger: confirmed reservations.

The ledger holds no locks and never retries. Double-booking protection
comes entirely from the store's uniqueness constraint on
(coach_id, start): when N callers race for the same slot, the store
admits one and the rest get SlotConflictError.
"""

import logging
from datetime import datetime

from .models import Booking
from .storage import SchedulingStore

logger = logging.getLogger(__name__)


class BookingLedger:
    """Queries and mutations over confirmed bookings."""

    def __init__(self, store: SchedulingStore) -> None:
        self._store = store

    def bookings_in_range(self, coach_id: int, start: datetime, end: datetime) -> set[datetime]:
        """Start instants of a coach's bookings in the half-open range [start, end)."""
        return self._store.bookings_in_range(coach_id, start, end)

    def try_insert(self, user_id: int, coach_id: int, start: datetime, end: datetime) -> Booking:
        """
        Atomically create a booking.

        Raises:
            SlotConflictError: the (coach, start) pair is already booked
            StorageError: any other backing-store failure
        """
        booking = self._store.insert_booking_atomic(user_id, coach_id, start, end)
        logger.info(
            "Booking inserted",
            extra={
                "booking_id": booking.id,
                "coach_id": coach_id,
                "user_id": user_id,
                "start": booking.start.isoformat(),
            }
        )
        return booking

    def cancel(self, booking_id: int) -> bool:
        """Delete a booking. Returns whether a row existed."""
        deleted = self._store.delete_booking(booking_id) > 0
        logger.info(
            "Booking cancel requested",
            extra={"booking_id": booking_id, "deleted": deleted}
        )
        return deleted

    def list_for_user(self, user_id: int, from_instant: datetime) -> list[Booking]:
        """Bookings at or after from_instant, earliest first."""
        return self._store.bookings_for_user(user_id, from_instant)
