"""
Pydantic schemas for generated booking slots
"""
from datetime import date
from typing import List
from uuid import UUID

from app.schemas.base import CamelModel


class SlotResponse(CamelModel):
    time: str
    end_time: str
    available: bool
    remaining_capacity: int


class SlotListResponse(CamelModel):
    date: date
    service_id: UUID
    service_duration: int
    slots: List[SlotResponse]
