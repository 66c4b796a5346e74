"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Can create multiple app instances if needed (e.g., for testing)

For local development:
    uvicorn coach_scheduling.main:app --reload

For production:
    gunicorn coach_scheduling.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.dependencies import get_scheduling_store
from .api.errors import scheduling_error_handler
from .api.routes import coaches, health, users
from .config.settings import get_settings
from .core.scheduling.errors import SchedulingError

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    On startup: validate configuration and create the store, which
    creates any missing tables for the SQL backend. Resolving the store
    here means the first request doesn't pay for it.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info(
        "Coach Scheduling API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {"database": settings.database_mock_mode},
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    store_provider = app.dependency_overrides.get(get_scheduling_store)
    if store_provider is None:
        get_scheduling_store(settings)

    yield

    logger.info("Coach Scheduling API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    This function is called once at startup (in production) or
    multiple times (in tests with different configurations).
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="""
        Appointment scheduling between coaches and users.

        ## Workflow

        1. **Register a coach**: `POST /api/v1/coaches` with an IANA timezone
        2. **Declare availability**: `POST /api/v1/coaches/availability`
           - Recurring weekly windows in the coach's local time
        3. **Find slots**: `GET /api/v1/users/slots?coach_id=..&date=YYYY-MM-DD`
           - 30-minute slots, returned in UTC
        4. **Book**: `POST /api/v1/users/bookings`
           - 409 if someone else got the slot first
        5. **Manage**: `GET /api/v1/users/bookings`, `DELETE /api/v1/users/bookings/{id}`
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    # Configure allowed origins via CORS_ORIGINS environment variable
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        coaches.router,
        prefix="/api/v1/coaches",
        tags=["Coaches"],
    )

    app.include_router(
        users.router,
        prefix="/api/v1/users",
        tags=["Users"],
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - points to docs."""
        return {
            "message": "Coach Scheduling API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    app.add_exception_handler(SchedulingError, scheduling_error_handler)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Prevents stack traces from leaking to clients. We log the full
        error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": __version__,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "coach_scheduling.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
