"""
Slot generation and booking validation.

Contains the scheduling service, domain models, error taxonomy and the
storage protocol that backends implement.
"""

from .errors import (
    BoundaryViolationError,
    CoachNotFoundError,
    ErrorKind,
    InvalidTimezoneError,
    MalformedInputError,
    NotFoundError,
    OutsideAvailabilityError,
    SchedulingError,
    SlotConflictError,
    StorageError,
)
from .models import (
    SLOT_DURATION,
    AvailabilityWindow,
    Booking,
    Coach,
    LocalTime,
    SlotQuery,
)
from .service import SchedulingService
from .storage import SchedulingStore

__all__ = [
    "BoundaryViolationError",
    "CoachNotFoundError",
    "ErrorKind",
    "InvalidTimezoneError",
    "MalformedInputError",
    "NotFoundError",
    "OutsideAvailabilityError",
    "SchedulingError",
    "SlotConflictError",
    "StorageError",
    "SLOT_DURATION",
    "AvailabilityWindow",
    "Booking",
    "Coach",
    "LocalTime",
    "SlotQuery",
    "SchedulingService",
    "SchedulingStore",
]
