"""
FastAPI dependency injection.

Dependencies provide instances of services, stores, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests
- Configuration is centralized
- The database engine (and its connection pool) is created once

Each dependency is a function that FastAPI calls when needed.
"""

import logging
import threading
from typing import Annotated, Optional

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.scheduling.service import SchedulingService
from ..core.scheduling.storage import SchedulingStore
from ..infrastructure.database.client import DatabaseConfig, create_scheduling_store

logger = logging.getLogger(__name__)

# Process-wide store: the in-memory store in mock mode (so data persists
# across requests), otherwise the SQL repository holding the engine pool.
_scheduling_store: Optional[SchedulingStore] = None
_store_lock = threading.Lock()


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

def get_scheduling_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SchedulingStore:
    """
    Provide the scheduling store.

    Created on first use and shared afterwards. The store itself is
    safe for concurrent requests; the lock only guards creation.
    """
    global _scheduling_store

    if _scheduling_store is None:
        with _store_lock:
            if _scheduling_store is None:
                if settings.database_mock_mode:
                    _scheduling_store = create_scheduling_store(mock_mode=True)
                    logger.info("Created shared in-memory scheduling store")
                else:
                    config = DatabaseConfig(
                        url=settings.database_url,
                        echo=settings.database_echo,
                    )
                    _scheduling_store = create_scheduling_store(config=config)
                    logger.info("Created SQL scheduling store")

    return _scheduling_store


def reset_scheduling_store() -> None:
    """Forget the shared store (tests, or after changing settings)."""
    global _scheduling_store
    with _store_lock:
        _scheduling_store = None


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_scheduling_service(
    store: Annotated[SchedulingStore, Depends(get_scheduling_store)],
) -> SchedulingService:
    """
    Provide SchedulingService bound to the shared store.

    The service is stateless, so we create a new instance per request.
    """
    return SchedulingService(store)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SchedulingServiceDep = Annotated[SchedulingService, Depends(get_scheduling_service)]
SchedulingStoreDep = Annotated[SchedulingStore, Depends(get_scheduling_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
