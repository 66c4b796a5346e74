"""
Conversions between a coach's local wall clock and UTC instants.

Everything here is a pure function. Offsets always come from the zone
rules in effect at the date/time being converted (never "now"), so a
09:00 window on a summer date and on a winter date land on different
UTC instants in zones that observe DST.

Wall times that fall into a DST gap or overlap resolve with fold=0,
i.e. using the offset in effect before the transition.

Dates and instants whose conversion would leave datetime's supported
range (years 1..9999) raise MalformedInputError.
"""

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import BoundaryViolationError, InvalidTimezoneError, MalformedInputError

TimezoneLike = Union[str, tzinfo]

# RFC 3339 date-time: offset is mandatory, fractional seconds optional
# and of any length
_RFC3339_PATTERN = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# datetime stops at microseconds
_MAX_FRACTION_DIGITS = 6

_OUT_OF_RANGE = "datetime out of supported range"


def load_timezone(name: str) -> ZoneInfo:
    """
    Resolve an IANA timezone identifier.

    Raises InvalidTimezoneError for empty, malformed or unknown names.
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidTimezoneError("invalid timezone")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimezoneError(f"invalid timezone: {name}") from e


def resolve_zone(tz: TimezoneLike) -> tzinfo:
    """Accept either a zone name or an already-resolved tzinfo."""
    if isinstance(tz, tzinfo):
        return tz
    return load_timezone(tz)


def local_wall_clock_to_utc(day: date, hour: int, minute: int, tz: TimezoneLike) -> datetime:
    """UTC instant of hour:minute on the given local calendar date."""
    local = datetime(day.year, day.month, day.day, hour, minute, tzinfo=resolve_zone(tz))
    try:
        return local.astimezone(timezone.utc)
    except OverflowError as e:
        raise MalformedInputError(_OUT_OF_RANGE) from e


def shift_instant(instant: datetime, delta: timedelta) -> datetime:
    """instant + delta, or MalformedInputError past year 9999 / before year 1."""
    try:
        return instant + delta
    except OverflowError as e:
        raise MalformedInputError(_OUT_OF_RANGE) from e


def weekday_of(day: date, tz: TimezoneLike) -> int:
    """
    Local weekday (0=Sunday..6=Saturday) of a calendar date in a zone.

    The date is a day on the coach's calendar, not an instant, so the
    weekday is that of local midnight on that date.
    """
    local_midnight = datetime.combine(day, time(0, 0), tzinfo=resolve_zone(tz))
    return local_midnight.isoweekday() % 7


def start_of_local_day(day: date, tz: TimezoneLike) -> datetime:
    return local_wall_clock_to_utc(day, 0, 0, tz)


def local_day_bounds(day: date, tz: TimezoneLike) -> tuple[datetime, datetime]:
    """
    Half-open UTC interval [start, end) covering one local calendar day.

    The end is the next local midnight: 24h on ordinary days, 23h or 25h
    on DST transition days.
    """
    zone = resolve_zone(tz)
    try:
        next_day = day + timedelta(days=1)
    except OverflowError as e:
        raise MalformedInputError(_OUT_OF_RANGE) from e
    return start_of_local_day(day, zone), start_of_local_day(next_day, zone)


def to_local(instant: datetime, tz: TimezoneLike) -> datetime:
    zone = resolve_zone(tz)
    try:
        return instant.astimezone(zone)
    except OverflowError as e:
        raise MalformedInputError(_OUT_OF_RANGE) from e


def parse_instant(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp carrying offset information.

    Returns an aware datetime normalized to UTC. Naive timestamps,
    bare dates and anything unparsable raise MalformedInputError.

    Fractions finer than a microsecond are accepted when the extra
    digits are zero. Otherwise the instant can't sit on a slot boundary
    and BoundaryViolationError is raised rather than rounding it onto one.
    """
    match = _RFC3339_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise MalformedInputError("datetime must be RFC3339 with timezone")

    fraction = match.group("fraction") or ""
    offset = match.group("offset").upper().replace("Z", "+00:00")
    normalized = match.group("base").upper()
    if fraction:
        normalized += "." + fraction[:_MAX_FRACTION_DIGITS]
    normalized += offset

    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as e:
        raise MalformedInputError("datetime must be RFC3339 with timezone") from e
    try:
        parsed = parsed.astimezone(timezone.utc)
    except OverflowError as e:
        raise MalformedInputError(_OUT_OF_RANGE) from e

    if fraction[_MAX_FRACTION_DIGITS:].strip("0"):
        raise BoundaryViolationError(
            "slot must be on 30-minute boundary (minute 00 or 30)"
        )
    return parsed


def parse_local_date(value: str) -> date:
    """Parse a YYYY-MM-DD calendar date."""
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise MalformedInputError("date must be YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise MalformedInputError("date must be YYYY-MM-DD") from e


def format_instant(instant: datetime) -> str:
    """Canonical UTC representation, e.g. 2025-01-07T03:30:00Z."""
    return instant.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
