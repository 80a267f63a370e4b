"""
Pydantic schemas for weekly availability rules and blocked time ranges
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import CamelModel
from app.utils.time_utils import is_valid_time


# ============================================================================
# Request Schemas
# ============================================================================

class AvailabilityRuleUpsert(CamelModel):
    """
    Create or replace the rule for one weekday.
    `max_bookings_per_slot` left out keeps the stored capacity (1 for new rules).
    """
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday .. 6=Saturday")
    is_open: bool = False
    start_time: str = Field(default="09:00", description="HH:MM, 24h")
    end_time: str = Field(default="17:00", description="HH:MM, 24h")
    slot_duration: int = Field(default=30, ge=5, le=1440, description="Grid step in minutes")
    max_bookings_per_slot: Optional[int] = Field(default=None, ge=1)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v):
        if not is_valid_time(v):
            raise ValueError("Time must be in HH:MM format")
        return v


class BlockedTimeCreate(CamelModel):
    start_datetime: datetime = Field(..., alias="startDateTime")
    end_datetime: datetime = Field(..., alias="endDateTime")
    reason: Optional[str] = Field(None, max_length=500)


# ============================================================================
# Response Schemas
# ============================================================================

class AvailabilityRuleResponse(CamelModel):
    id: Optional[UUID] = None  # None for a weekday that has never been configured
    business_id: UUID
    day_of_week: int
    is_open: bool
    start_time: str
    end_time: str
    slot_duration: int
    max_bookings_per_slot: int


class BlockedTimeResponse(CamelModel):
    id: UUID
    business_id: UUID
    start_datetime: datetime = Field(..., alias="startDateTime")
    end_datetime: datetime = Field(..., alias="endDateTime")
    reason: Optional[str] = None
