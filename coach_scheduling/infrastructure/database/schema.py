"""
Relational schema for coaches, availability windows and bookings.

Defined with SQLAlchemy Core so the same tables work on SQLite (local
development, tests) and MySQL (production). Instants are stored as naive
UTC DATETIMEs; the repository attaches UTC on the way out.

The unique key on bookings (coach_id, start_time) is what makes
double-booking impossible. Don't drop it.
"""

import logging

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

BOOKING_UNIQUE_CONSTRAINT = "ux_coach_start"

metadata = MetaData()

coaches = Table(
    "coaches",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=True),
    Column("timezone", String(64), nullable=False),
    Column("created_at", DateTime, nullable=False),
)

coach_availabilities = Table(
    "coach_availabilities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "coach_id",
        Integer,
        ForeignKey("coaches.id", ondelete="CASCADE", name="fk_ca_coach"),
        nullable=False,
    ),
    Column("day_of_week", SmallInteger, nullable=False),  # 0=Sunday..6=Saturday
    Column("start_time", String(5), nullable=False),  # 'HH:MM'
    Column("end_time", String(5), nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    Index("idx_coach_day", "coach_id", "day_of_week"),
)

bookings = Table(
    "bookings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),
    Column(
        "coach_id",
        Integer,
        ForeignKey("coaches.id", ondelete="CASCADE", name="fk_b_coach"),
        nullable=False,
    ),
    Column("start_time", DateTime, nullable=False),
    Column("end_time", DateTime, nullable=False),
    Column("created_at", DateTime, nullable=False),
    UniqueConstraint("coach_id", "start_time", name=BOOKING_UNIQUE_CONSTRAINT),
    Index("idx_bookings_user_start", "user_id", "start_time"),
)


def init_schema(engine: Engine) -> None:
    """Create any missing tables. Safe to run on every startup."""
    metadata.create_all(engine)
    logger.info(
        "Database schema ensured",
        extra={"tables": sorted(metadata.tables)}
    )
