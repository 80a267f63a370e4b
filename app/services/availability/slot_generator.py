# ===== app/services/availability/slot_generator.py =====
"""
Slot generation for the public booking page.

Walks the day's slot grid (open time to close time, stepped by the rule's
slot_duration) and flags every start time where the whole service fits
before closing. Each slot is checked against:
  - capacity: overlapping non-cancelled bookings vs max_bookings_per_slot
  - the clock: past dates, and start times already gone today
  - blocked time ranges

Unavailable slots are returned flagged, never dropped.
"""
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.models.availability import AvailabilityRule, BlockedTime
from app.models.booking import Booking, BookingStatus
from app.models.business import Business
from app.models.service import Service
from app.services.availability.availability_service import AvailabilityService
from app.services.availability.blocked_time_service import BlockedTimeService
from app.utils.time_utils import (
    combine,
    intervals_overlap,
    minutes_to_time,
    ranges_overlap,
    time_to_minutes,
)
import logging

logger = logging.getLogger(__name__)


def count_overlapping(start_time: str, end_time: str, bookings: Iterable[Booking]) -> int:
    """Number of non-cancelled bookings intersecting [start_time, end_time)"""
    return sum(
        1 for booking in bookings
        if not booking.is_cancelled
        and intervals_overlap(start_time, end_time, booking.start_time, booking.end_time)
    )


def is_blocked(target_date: date, start_time: str, end_time: str,
               blocked_times: Iterable[BlockedTime]) -> bool:
    start = combine(target_date, start_time)
    end = combine(target_date, end_time)
    return any(
        ranges_overlap(blocked.start_datetime, blocked.end_datetime, start, end)
        for blocked in blocked_times
    )


def generate_slots(
        target_date: date,
        service_duration: int,
        rule: Optional[AvailabilityRule],
        bookings: Sequence[Booking],
        blocked_times: Sequence[BlockedTime] = (),
        now: Optional[datetime] = None
) -> List[Dict]:
    """Ordered slot grid for one day; see module docstring"""
    if rule is None or not rule.is_open:
        return []

    now = now or datetime.now()
    is_today = target_date == now.date()
    is_past_day = target_date < now.date()
    step = rule.slot_duration
    capacity = rule.max_bookings_per_slot

    if step <= 0 or service_duration <= 0:
        return []

    day_start = time_to_minutes(rule.start_time)
    day_end = time_to_minutes(rule.end_time)

    slots = []
    t = day_start
    while t + service_duration <= day_end:
        slot_start = minutes_to_time(t)
        slot_end = minutes_to_time(t + service_duration)

        overlapping = count_overlapping(slot_start, slot_end, bookings)
        at_capacity = overlapping >= capacity
        is_past = is_past_day or (is_today and combine(target_date, slot_start) < now)
        blocked = is_blocked(target_date, slot_start, slot_end, blocked_times)

        slots.append({
            "time": slot_start,
            "end_time": slot_end,
            "available": not (at_capacity or is_past or blocked),
            "remaining_capacity": max(0, capacity - overlapping),
        })

        t += step

    return slots


class SlotService:
    """Loads a business' state for a date and runs the slot generator"""

    @staticmethod
    def get_slots(
            db: Session,
            business: Business,
            service: Service,
            target_date: date,
            now: Optional[datetime] = None
    ) -> List[Dict]:
        rule = AvailabilityService.get_rule_for_date(db, business.id, target_date)
        if not rule.is_open:
            return []

        # Read-only and advisory: the authoritative check runs at booking time
        bookings = db.query(Booking).filter(
            Booking.business_id == business.id,
            Booking.booking_date == target_date,
            Booking.status != BookingStatus.CANCELLED.value
        ).all()
        blocked_times = BlockedTimeService.list_for_date(db, business.id, target_date)

        slots = generate_slots(
            target_date=target_date,
            service_duration=service.duration,
            rule=rule,
            bookings=bookings,
            blocked_times=blocked_times,
            now=now,
        )

        logger.debug(
            f"Generated {len(slots)} slots for business {business.id} service {service.id} "
            f"on {target_date} ({sum(1 for s in slots if s['available'])} available)"
        )
        return slots
