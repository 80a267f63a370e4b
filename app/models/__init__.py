# app/models/__init__.py
from .base import Base
from .business import Business
from .service import Service
from .availability import AvailabilityRule, BlockedTime
from .booking import Booking, BookingStatus

__all__ = [
    "Base",
    "Business",
    "Service",
    "AvailabilityRule",
    "BlockedTime",
    "Booking",
    "BookingStatus",
]
