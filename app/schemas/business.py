"""
Pydantic schemas for the public business page
"""
from typing import Optional
from uuid import UUID

from pydantic import field_serializer
from decimal import Decimal

from app.schemas.base import CamelModel


class PublicBusinessResponse(CamelModel):
    """Business data safe to show on the public booking page"""
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None


class ServiceResponse(CamelModel):
    """Response model for service data"""
    id: UUID
    business_id: UUID
    name: str
    description: Optional[str] = None
    price: Optional[Decimal] = None
    duration: int
    formatted_duration: str
    is_active: bool
    requires_confirmation: bool
    display_order: int = 0

    @field_serializer("price")
    def serialize_price(self, price: Optional[Decimal]):
        return float(price) if price is not None else None
