"""
Error taxonomy for scheduling operations.

Every failure the core can report is a SchedulingError subclass carrying
a machine-readable kind and a human-readable reason. The transport layer
maps kinds to status codes; nothing below it knows about HTTP.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable identifiers for each failure class."""
    MALFORMED_INPUT = "malformed_input"
    INVALID_TIMEZONE = "invalid_timezone"
    COACH_NOT_FOUND = "coach_not_found"
    BOUNDARY_VIOLATION = "boundary_violation"
    OUTSIDE_AVAILABILITY = "outside_availability"
    SLOT_CONFLICT = "slot_conflict"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


class SchedulingError(Exception):
    """Base class for all scheduling failures."""

    kind: ErrorKind = ErrorKind.STORAGE_ERROR

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, reason={self.reason!r})"


class MalformedInputError(SchedulingError):
    """Unparsable timestamp, weekday out of range, or bad HH:MM value."""
    kind = ErrorKind.MALFORMED_INPUT


class InvalidTimezoneError(SchedulingError):
    """Timezone identifier does not resolve to an IANA zone."""
    kind = ErrorKind.INVALID_TIMEZONE


class CoachNotFoundError(SchedulingError):
    kind = ErrorKind.COACH_NOT_FOUND


class BoundaryViolationError(SchedulingError):
    """Requested start is not on a :00 or :30 UTC minute mark."""
    kind = ErrorKind.BOUNDARY_VIOLATION


class OutsideAvailabilityError(SchedulingError):
    kind = ErrorKind.OUTSIDE_AVAILABILITY


class SlotConflictError(SchedulingError):
    """
    Raised when storage rejects a second booking for the same
    (coach, start instant) pair.

    Never retried: the caller has to re-query slots.
    """
    kind = ErrorKind.SLOT_CONFLICT


class NotFoundError(SchedulingError):
    kind = ErrorKind.NOT_FOUND


class StorageError(SchedulingError):
    """Transient or backing-store failure. Retry policy belongs to the caller."""
    kind = ErrorKind.STORAGE_ERROR
