# ===== app/services/booking/conflict_validator.py =====
"""
Write-time overlap check for new (or reactivated) bookings.

Uses the same interval predicate as the slot generator and the same
capacity rule: the request is rejected once the number of overlapping
non-cancelled bookings reaches the day's max_bookings_per_slot.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID

from app.core.exceptions import TimeSlotUnavailableError
from app.models.availability import BlockedTime
from app.models.booking import Booking
from app.utils.time_utils import combine, intervals_overlap, ranges_overlap


@dataclass
class ConflictCheck:
    capacity: int
    overlapping: List[Booking] = field(default_factory=list)
    blocked_by: List[BlockedTime] = field(default_factory=list)

    @property
    def capacity_used(self) -> int:
        return len(self.overlapping)

    @property
    def capacity_exceeded(self) -> bool:
        return self.capacity_used >= self.capacity

    @property
    def is_available(self) -> bool:
        return not self.capacity_exceeded and not self.blocked_by


def check_conflict(
        start_time: str,
        end_time: str,
        bookings: Iterable[Booking],
        capacity: int = 1,
        blocked_times: Iterable[BlockedTime] = (),
        booking_date: Optional[date] = None,
        exclude_booking_id: Optional[UUID] = None
) -> ConflictCheck:
    """
    Evaluate a proposed [start_time, end_time) interval.

    Cancelled bookings and `exclude_booking_id` never count. Blocked times
    are only checked when `booking_date` is given.
    """
    overlapping = [
        booking for booking in bookings
        if not booking.is_cancelled
        and (exclude_booking_id is None or booking.id != exclude_booking_id)
        and intervals_overlap(start_time, end_time, booking.start_time, booking.end_time)
    ]

    blocked_by = []
    if booking_date is not None:
        start = combine(booking_date, start_time)
        end = combine(booking_date, end_time)
        blocked_by = [
            blocked for blocked in blocked_times
            if ranges_overlap(blocked.start_datetime, blocked.end_datetime, start, end)
        ]

    return ConflictCheck(capacity=max(1, capacity), overlapping=overlapping, blocked_by=blocked_by)


def ensure_available(
        start_time: str,
        end_time: str,
        bookings: Iterable[Booking],
        capacity: int = 1,
        blocked_times: Iterable[BlockedTime] = (),
        booking_date: Optional[date] = None,
        exclude_booking_id: Optional[UUID] = None
) -> ConflictCheck:
    """check_conflict, raising TimeSlotUnavailableError on rejection"""
    result = check_conflict(
        start_time,
        end_time,
        bookings,
        capacity=capacity,
        blocked_times=blocked_times,
        booking_date=booking_date,
        exclude_booking_id=exclude_booking_id,
    )
    if not result.is_available:
        raise TimeSlotUnavailableError()
    return result
