"""
Repository pattern implementations for the relational backend.

Repositories translate between domain models and database representations.
"""

from .scheduling import SchedulingRepository

__all__ = ["SchedulingRepository"]
