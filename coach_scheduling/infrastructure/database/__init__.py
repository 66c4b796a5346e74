"""
Scheduling persistence.

Provides the SQL repository, the in-memory store and the factory that
picks one based on configuration.
"""

from .client import (
    DatabaseConfig,
    DatabaseConnectionError,
    create_database_engine,
    create_scheduling_store,
)
from .memory import InMemorySchedulingStore
from .repositories import SchedulingRepository
from .schema import init_schema

__all__ = [
    "DatabaseConfig",
    "DatabaseConnectionError",
    "InMemorySchedulingStore",
    "SchedulingRepository",
    "create_database_engine",
    "create_scheduling_store",
    "init_schema",
]
