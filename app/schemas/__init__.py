# app/schemas/__init__.py
from .business import (
    PublicBusinessResponse,
    ServiceResponse
)

from .availability import (
    AvailabilityRuleUpsert,
    AvailabilityRuleResponse,
    BlockedTimeCreate,
    BlockedTimeResponse
)

from .booking import (
    BookingCreate,
    BookingUpdate,
    BookingResponse,
    PublicBookingResponse,
    BookingListResponse,
    DashboardSummaryResponse
)

from .slots import (
    SlotResponse,
    SlotListResponse
)

__all__ = [
    "PublicBusinessResponse",
    "ServiceResponse",
    "AvailabilityRuleUpsert",
    "AvailabilityRuleResponse",
    "BlockedTimeCreate",
    "BlockedTimeResponse",
    "BookingCreate",
    "BookingUpdate",
    "BookingResponse",
    "PublicBookingResponse",
    "BookingListResponse",
    "DashboardSummaryResponse",
    "SlotResponse",
    "SlotListResponse",
]
