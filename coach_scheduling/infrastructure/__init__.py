"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- database: Relational persistence (SQLAlchemy) and the in-memory store

These wrappers translate between external formats and our domain models.
"""
