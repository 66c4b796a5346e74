"""
Coach Scheduling - appointment booking between coaches and users.

This package contains the complete application:
- core: Framework-agnostic scheduling logic
- infrastructure: Storage backends
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
