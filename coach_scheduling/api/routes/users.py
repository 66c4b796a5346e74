"""
User-facing API endpoints.

Users look up open slots for a coach on a date, book one, list their
upcoming bookings and cancel them. All instants in responses are UTC in
RFC 3339 form (YYYY-MM-DDTHH:MM:SSZ).
"""

import logging

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from ...core.scheduling.models import Booking
from ...core.scheduling.timeconv import format_instant
from ..dependencies import SchedulingServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class SlotsResponse(BaseModel):
    """Open slots for a coach on one local date."""
    coach_id: int = Field(description="Coach identifier")
    date: str = Field(description="Requested date in the coach's timezone (YYYY-MM-DD)")
    timezone: str = Field(description="Coach's IANA timezone")
    slots: list[str] = Field(description="Open 30-minute slot starts, UTC")


class BookingRequest(BaseModel):
    """Request to book a slot."""
    user_id: int = Field(description="User identifier")
    coach_id: int = Field(description="Coach identifier")
    datetime: str = Field(
        description="Slot start, RFC 3339 with offset (e.g. 2025-01-07T03:30:00Z)",
    )


class BookingItem(BaseModel):
    """A single booking."""
    id: int = Field(description="Booking identifier")
    coach_id: int = Field(description="Coach identifier")
    start: str = Field(description="Slot start, UTC")
    end: str = Field(description="Slot end, UTC")
    created_at: str = Field(description="When the booking was made, UTC")


class BookingCreatedResponse(BaseModel):
    """Confirmation of a new booking."""
    status: str = Field(description="Always 'booked'")
    id: int = Field(description="Booking identifier")
    coach_id: int = Field(description="Coach identifier")
    user_id: int = Field(description="User identifier")
    start: str = Field(description="Canonical slot start, UTC")
    end: str = Field(description="Slot end, UTC")


class UserBookingsResponse(BaseModel):
    """A user's upcoming bookings."""
    bookings: list[BookingItem] = Field(description="Bookings, earliest first")


class CancelResponse(BaseModel):
    status: str = Field(description="Always 'cancelled'")


def _booking_item(booking: Booking) -> BookingItem:
    return BookingItem(
        id=booking.id,
        coach_id=booking.coach_id,
        start=format_instant(booking.start),
        end=format_instant(booking.end),
        created_at=format_instant(booking.created_at),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/slots",
    response_model=SlotsResponse,
    status_code=status.HTTP_200_OK,
    summary="List open slots",
    description="Open 30-minute slots for a coach on a date in the coach's timezone",
)
def get_slots(
    service: SchedulingServiceDep,
    coach_id: int = Query(description="Coach identifier"),
    date: str = Query(description="Date in the coach's timezone, YYYY-MM-DD"),
) -> SlotsResponse:
    """
    Compute open slots.

    The date is interpreted on the coach's local calendar, so the slots
    returned are those of that local day, expressed in UTC. Slots already
    booked are left out.
    """
    result = service.query_slots(coach_id, date)
    return SlotsResponse(
        coach_id=result.coach_id,
        date=result.local_date.isoformat(),
        timezone=result.timezone,
        slots=[format_instant(slot) for slot in result.slots],
    )


@router.post(
    "/bookings",
    response_model=BookingCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a slot",
    description="Reserve a 30-minute slot. Returns 409 if it is already taken.",
    responses={
        409: {"description": "Slot already booked"},
    },
)
def create_booking(
    request: BookingRequest,
    service: SchedulingServiceDep,
) -> BookingCreatedResponse:
    """
    Book a slot.

    The requested start must be on a :00 or :30 UTC minute and fall
    inside one of the coach's windows for that local date. The response
    echoes the canonical UTC start, not the submitted string.
    """
    booking = service.create_booking(request.user_id, request.coach_id, request.datetime)

    logger.info(
        "Booking created",
        extra={
            "booking_id": booking.id,
            "coach_id": booking.coach_id,
            "user_id": booking.user_id,
        }
    )

    return BookingCreatedResponse(
        status="booked",
        id=booking.id,
        coach_id=booking.coach_id,
        user_id=booking.user_id,
        start=format_instant(booking.start),
        end=format_instant(booking.end),
    )


@router.get(
    "/bookings",
    response_model=UserBookingsResponse,
    status_code=status.HTTP_200_OK,
    summary="List my bookings",
    description="Upcoming bookings for a user, earliest first",
)
def list_bookings(
    service: SchedulingServiceDep,
    user_id: int = Query(description="User identifier"),
) -> UserBookingsResponse:
    bookings = service.list_user_bookings(user_id)
    return UserBookingsResponse(bookings=[_booking_item(b) for b in bookings])


@router.delete(
    "/bookings/{booking_id}",
    response_model=CancelResponse,
    status_code=status.HTTP_200_OK,
    summary="Cancel a booking",
    responses={
        404: {"description": "Booking not found"},
    },
)
def cancel_booking(
    booking_id: int,
    service: SchedulingServiceDep,
) -> CancelResponse:
    service.cancel_booking(booking_id)
    logger.info("Booking cancelled", extra={"booking_id": booking_id})
    return CancelResponse(status="cancelled")
