"""
Coach-facing API endpoints.

Coaches register with their IANA timezone and declare recurring weekly
availability in local wall-clock time. Slot generation later anchors
those windows onto concrete dates.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ..dependencies import SchedulingServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class CreateCoachRequest(BaseModel):
    """Request to register a coach."""
    name: str = Field(description="Display name", min_length=1, max_length=255)
    timezone: str = Field(
        description="IANA timezone identifier, e.g. Asia/Kolkata",
        min_length=1,
        max_length=64,
    )


class CoachResponse(BaseModel):
    """A registered coach."""
    id: int = Field(description="Coach identifier")
    name: str = Field(description="Display name")
    timezone: str = Field(description="IANA timezone identifier")


class AvailabilityRequest(BaseModel):
    """Request to add a recurring weekly availability window."""
    coach_id: int = Field(description="Coach identifier")
    day: int = Field(description="Weekday, 0=Sunday..6=Saturday")
    start_time: str = Field(description="Local start time, HH:MM")
    end_time: str = Field(description="Local end time, HH:MM")


class AvailabilityResponse(BaseModel):
    """A stored availability window."""
    id: int = Field(description="Window identifier")
    coach_id: int = Field(description="Coach identifier")
    day: int = Field(description="Weekday, 0=Sunday..6=Saturday")
    start_time: str = Field(description="Local start time, HH:MM")
    end_time: str = Field(description="Local end time, HH:MM")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=CoachResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a coach",
    description="Create a coach. The timezone must be a valid IANA identifier.",
)
def create_coach(
    request: CreateCoachRequest,
    service: SchedulingServiceDep,
) -> CoachResponse:
    coach = service.create_coach(request.name, request.timezone)
    return CoachResponse(id=coach.id, name=coach.name, timezone=coach.timezone)


@router.post(
    "/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add availability window",
    description="Declare a recurring weekly window in the coach's local time",
)
def add_availability(
    request: AvailabilityRequest,
    service: SchedulingServiceDep,
) -> AvailabilityResponse:
    """
    Add a recurring availability window.

    Windows on the same weekday may overlap; they are stored and used
    independently, never merged.
    """
    window = service.add_availability(
        coach_id=request.coach_id,
        weekday=request.day,
        start=request.start_time,
        end=request.end_time,
    )
    return AvailabilityResponse(
        id=window.id,
        coach_id=window.coach_id,
        day=window.weekday,
        start_time=str(window.start),
        end_time=str(window.end),
    )
