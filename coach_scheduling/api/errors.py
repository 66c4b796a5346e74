"""
Mapping of scheduling errors onto HTTP responses.

Routes don't catch SchedulingError themselves; they let it propagate and
this handler turns the error kind into a status code. The body always
carries the kind (machine-readable) and the reason (human-readable).
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..core.scheduling.errors import ErrorKind, SchedulingError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.MALFORMED_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_TIMEZONE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BOUNDARY_VIOLATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.OUTSIDE_AVAILABILITY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.COACH_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.SLOT_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.STORAGE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    log = logger.warning if status_code >= 500 else logger.info
    log(
        "Scheduling request failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "kind": exc.kind.value,
            "reason": exc.reason,
        }
    )

    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.reason, "kind": exc.kind.value},
    )
