"""
Pydantic schemas for bookings
"""
from datetime import date, datetime
from typing import Optional, List
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.models.booking import BookingStatus
from app.schemas.base import CamelModel
from app.utils.time_utils import is_valid_time, parse_date, to_wall_clock


def _validate_hhmm(v):
    if v is not None and not is_valid_time(v):
        raise ValueError("Time must be in HH:MM format")
    return v


# ============================================================================
# Request Schemas
# ============================================================================

class BookingCreate(CamelModel):
    """Public booking request"""
    service_id: UUID
    booking_date: date
    start_time: str
    end_time: Optional[str] = None  # derived from the service duration when omitted
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=50)
    customer_notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("booking_date", mode="before")
    @classmethod
    def parse_booking_date(cls, v):
        """Accept full ISO timestamps (the booking page sends one) as well as plain dates"""
        if isinstance(v, str) and "T" in v:
            return parse_date(v)
        if isinstance(v, datetime):
            return to_wall_clock(v).date()
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v):
        return _validate_hhmm(v)


class BookingUpdate(CamelModel):
    """Owner-side update; every field optional"""
    status: Optional[BookingStatus] = None
    internal_notes: Optional[str] = None


# ============================================================================
# Response Schemas
# ============================================================================

class BookingResponse(CamelModel):
    id: UUID
    business_id: UUID
    service_id: UUID
    booking_date: date
    start_time: str
    end_time: str
    status: BookingStatus
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    customer_notes: Optional[str] = None
    internal_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class PublicBookingResponse(CamelModel):
    """Occupied slot as shown on the public page (no customer details)"""
    id: UUID
    service_id: UUID
    booking_date: date
    start_time: str
    end_time: str
    status: BookingStatus


class BookingListResponse(CamelModel):
    total: int
    bookings: List[BookingResponse]


class DashboardSummaryResponse(CamelModel):
    date: date
    todays_bookings: int
    upcoming_bookings: int
    pending_bookings: int
    upcoming_blocked_times: int
    next_blocked_time: Optional[datetime] = None
