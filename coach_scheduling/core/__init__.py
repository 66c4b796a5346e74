"""
Core business logic for coach scheduling.

This module is framework-agnostic - it doesn't import FastAPI, SQLAlchemy,
or any infrastructure concerns. Timezone arithmetic, slot generation and
booking validation can be tested in isolation against an in-memory store.
"""
