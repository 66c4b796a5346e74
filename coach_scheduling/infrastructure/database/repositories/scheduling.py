"""
SQL repository for coaches, availability and bookings.

This module implements the repository pattern for scheduling data. The
repository:
1. Translates between domain models and database rows
2. Encapsulates all SQL (via SQLAlchemy Core)
3. Converts driver exceptions into the core's error taxonomy

The booking insert runs in its own transaction and relies on the
ux_coach_start unique key; a violation surfaces as SlotConflictError,
every other database failure as StorageError.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import delete, insert, select, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ....core.scheduling.errors import SchedulingError, SlotConflictError, StorageError
from ....core.scheduling.models import AvailabilityWindow, Booking, Coach, LocalTime
from ..schema import BOOKING_UNIQUE_CONSTRAINT, bookings, coach_availabilities, coaches

logger = logging.getLogger(__name__)

# MySQL ER_DUP_ENTRY
_MYSQL_DUPLICATE_ENTRY = 1062
# PostgreSQL unique_violation
_POSTGRES_UNIQUE_VIOLATION = "23505"


def _to_db(instant: datetime) -> datetime:
    """Aware datetime -> naive UTC for storage."""
    return instant.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db(value: datetime) -> datetime:
    """Naive UTC from storage -> aware UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _is_uniqueness_violation(error: IntegrityError) -> bool:
    """
    Tell a duplicate-key error apart from other integrity failures
    (foreign keys, NOT NULL) across the drivers we support.
    """
    orig = error.orig
    args = getattr(orig, "args", ())
    if args and args[0] == _MYSQL_DUPLICATE_ENTRY:
        return True
    if getattr(orig, "pgcode", None) == _POSTGRES_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    message = str(orig)
    return (
        "UNIQUE constraint failed" in message
        or "Duplicate entry" in message
        or BOOKING_UNIQUE_CONSTRAINT in message
    )


class SchedulingRepository:
    """
    Relational implementation of the SchedulingStore protocol.

    Holds an Engine, not a connection: each call checks a connection out
    of the pool and returns it, so one repository can serve concurrent
    requests.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _unit_of_work(self, operation: str, write: bool = False) -> Iterator[Connection]:
        """
        Connection scope for one operation.

        Writes run inside engine.begin(): committed on success, rolled
        back on any exception.
        """
        try:
            scope = self._engine.begin() if write else self._engine.connect()
            with scope as conn:
                yield conn
        except SchedulingError:
            raise
        except SQLAlchemyError as e:
            logger.error(
                "Database operation failed",
                extra={"operation": operation, "error": str(e)}
            )
            raise StorageError(f"{operation} failed: storage unavailable") from e

    # -----------------------------------------------------------------------
    # Coaches
    # -----------------------------------------------------------------------

    def insert_coach(self, name: str, timezone_name: str) -> Coach:
        with self._unit_of_work("insert_coach", write=True) as conn:
            result = conn.execute(
                insert(coaches).values(name=name, timezone=timezone_name, created_at=_utcnow())
            )
            coach_id = result.inserted_primary_key[0]
        return Coach(id=coach_id, name=name, timezone=timezone_name)

    def lookup_coach_timezone(self, coach_id: int) -> Optional[str]:
        with self._unit_of_work("lookup_coach_timezone") as conn:
            return conn.execute(
                select(coaches.c.timezone).where(coaches.c.id == coach_id)
            ).scalar_one_or_none()

    # -----------------------------------------------------------------------
    # Availability
    # -----------------------------------------------------------------------

    def insert_availability(
        self,
        coach_id: int,
        weekday: int,
        start: LocalTime,
        end: LocalTime,
    ) -> AvailabilityWindow:
        now = _utcnow()
        with self._unit_of_work("insert_availability", write=True) as conn:
            result = conn.execute(
                insert(coach_availabilities).values(
                    coach_id=coach_id,
                    day_of_week=weekday,
                    start_time=str(start),
                    end_time=str(end),
                    created_at=now,
                    updated_at=now,
                )
            )
            window_id = result.inserted_primary_key[0]
        return AvailabilityWindow(
            id=window_id,
            coach_id=coach_id,
            weekday=weekday,
            start=start,
            end=end,
        )

    def windows_for(self, coach_id: int, weekday: int) -> list[AvailabilityWindow]:
        with self._unit_of_work("windows_for") as conn:
            rows = conn.execute(
                select(
                    coach_availabilities.c.id,
                    coach_availabilities.c.start_time,
                    coach_availabilities.c.end_time,
                )
                .where(
                    coach_availabilities.c.coach_id == coach_id,
                    coach_availabilities.c.day_of_week == weekday,
                )
                .order_by(coach_availabilities.c.id)
            ).all()

        return [
            AvailabilityWindow(
                id=row.id,
                coach_id=coach_id,
                weekday=weekday,
                start=LocalTime.parse(row.start_time),
                end=LocalTime.parse(row.end_time),
            )
            for row in rows
        ]

    # -----------------------------------------------------------------------
    # Bookings
    # -----------------------------------------------------------------------

    def bookings_in_range(
        self,
        coach_id: int,
        start: datetime,
        end: datetime,
    ) -> set[datetime]:
        with self._unit_of_work("bookings_in_range") as conn:
            values = conn.execute(
                select(bookings.c.start_time).where(
                    bookings.c.coach_id == coach_id,
                    bookings.c.start_time >= _to_db(start),
                    bookings.c.start_time < _to_db(end),
                )
            ).scalars().all()
        return {_from_db(value) for value in values}

    def insert_booking_atomic(
        self,
        user_id: int,
        coach_id: int,
        start: datetime,
        end: datetime,
    ) -> Booking:
        created_at = _utcnow()
        with self._unit_of_work("insert_booking", write=True) as conn:
            try:
                result = conn.execute(
                    insert(bookings).values(
                        user_id=user_id,
                        coach_id=coach_id,
                        start_time=_to_db(start),
                        end_time=_to_db(end),
                        created_at=created_at,
                    )
                )
            except IntegrityError as e:
                if _is_uniqueness_violation(e):
                    logger.info(
                        "Booking rejected by unique key",
                        extra={"coach_id": coach_id, "start": start.isoformat()}
                    )
                    raise SlotConflictError("slot already booked") from e
                raise
            booking_id = result.inserted_primary_key[0]

        return Booking(
            id=booking_id,
            user_id=user_id,
            coach_id=coach_id,
            start=_from_db(_to_db(start)),
            end=_from_db(_to_db(end)),
            created_at=_from_db(created_at),
        )

    def delete_booking(self, booking_id: int) -> int:
        with self._unit_of_work("delete_booking", write=True) as conn:
            result = conn.execute(delete(bookings).where(bookings.c.id == booking_id))
            return result.rowcount

    def bookings_for_user(self, user_id: int, from_instant: datetime) -> list[Booking]:
        with self._unit_of_work("bookings_for_user") as conn:
            rows = conn.execute(
                select(bookings)
                .where(
                    bookings.c.user_id == user_id,
                    bookings.c.start_time >= _to_db(from_instant),
                )
                .order_by(bookings.c.start_time, bookings.c.id)
            ).all()

        return [
            Booking(
                id=row.id,
                user_id=row.user_id,
                coach_id=row.coach_id,
                start=_from_db(row.start_time),
                end=_from_db(row.end_time),
                created_at=_from_db(row.created_at),
            )
            for row in rows
        ]

    def ping(self) -> None:
        with self._unit_of_work("ping") as conn:
            conn.execute(text("SELECT 1"))
