"""
Tests for slot generation.
"""
import uuid
from datetime import date, datetime, timedelta

from app.models.availability import AvailabilityRule, BlockedTime
from app.models.booking import Booking
from app.services.availability.slot_generator import SlotService, generate_slots

TARGET = date(2030, 6, 3)  # Monday
EARLIER = datetime(2030, 6, 1, 8, 0)


def make_rule(start="09:00", end="17:00", step=30, capacity=1, is_open=True):
    return AvailabilityRule(
        day_of_week=1,
        is_open=is_open,
        start_time=start,
        end_time=end,
        slot_duration=step,
        max_bookings_per_slot=capacity,
    )


def make_booking(start, end, status="confirmed"):
    return Booking(id=uuid.uuid4(), booking_date=TARGET, start_time=start, end_time=end, status=status)


def by_time(slots):
    return {slot["time"]: slot for slot in slots}


class TestSlotGrid:

    def test_full_day_grid(self):
        slots = generate_slots(TARGET, 30, make_rule(), [], now=EARLIER)

        assert len(slots) == 16
        assert slots[0]["time"] == "09:00"
        assert slots[-1]["time"] == "16:30"
        assert slots[-1]["end_time"] == "17:00"
        assert all(slot["available"] for slot in slots)
        assert all(slot["remaining_capacity"] == 1 for slot in slots)

    def test_service_must_fit_before_closing(self):
        slots = generate_slots(TARGET, 45, make_rule(step=15), [], now=EARLIER)

        assert len(slots) == 30
        assert slots[-1]["time"] == "16:15"
        assert slots[-1]["end_time"] == "17:00"

    def test_starts_stay_on_the_grid(self):
        slots = generate_slots(TARGET, 45, make_rule(step=30), [], now=EARLIER)

        assert slots[-1]["time"] == "16:00"
        assert "16:15" not in by_time(slots)

    def test_step_not_dividing_the_window(self):
        slots = generate_slots(TARGET, 30, make_rule(start="09:00", end="10:00", step=25), [], now=EARLIER)

        assert [slot["time"] for slot in slots] == ["09:00", "09:25"]

    def test_service_longer_than_the_day(self):
        assert generate_slots(TARGET, 120, make_rule(start="09:00", end="10:00"), [], now=EARLIER) == []

    def test_closed_day_has_no_slots(self):
        assert generate_slots(TARGET, 30, make_rule(is_open=False), [], now=EARLIER) == []

    def test_missing_rule_has_no_slots(self):
        assert generate_slots(TARGET, 30, None, [], now=EARLIER) == []

    def test_non_positive_step_has_no_slots(self):
        assert generate_slots(TARGET, 30, make_rule(step=0), [], now=EARLIER) == []


class TestSlotAvailability:

    def test_booked_slot_is_flagged_not_dropped(self):
        slots = by_time(generate_slots(TARGET, 30, make_rule(), [make_booking("10:00", "10:30")], now=EARLIER))

        assert len(slots) == 16
        assert slots["10:00"]["available"] is False
        assert slots["10:00"]["remaining_capacity"] == 0
        # Touching intervals are free
        assert slots["09:30"]["available"] is True
        assert slots["10:30"]["available"] is True

    def test_longer_service_overlapping_a_booking(self):
        slots = by_time(generate_slots(TARGET, 60, make_rule(), [make_booking("10:00", "10:30")], now=EARLIER))

        assert slots["09:00"]["available"] is True
        assert slots["09:30"]["available"] is False
        assert slots["10:00"]["available"] is False
        assert slots["10:30"]["available"] is True

    def test_capacity_allows_parallel_bookings(self):
        rule = make_rule(capacity=2)

        one = by_time(generate_slots(TARGET, 30, rule, [make_booking("10:00", "10:30")], now=EARLIER))
        assert one["10:00"]["available"] is True
        assert one["10:00"]["remaining_capacity"] == 1

        two = by_time(generate_slots(
            TARGET, 30, rule,
            [make_booking("10:00", "10:30"), make_booking("10:00", "10:30", status="pending")],
            now=EARLIER
        ))
        assert two["10:00"]["available"] is False
        assert two["10:00"]["remaining_capacity"] == 0

    def test_cancelled_bookings_do_not_count(self):
        slots = by_time(generate_slots(
            TARGET, 30, make_rule(), [make_booking("10:00", "10:30", status="cancelled")], now=EARLIER
        ))

        assert slots["10:00"]["available"] is True

    def test_past_slots_today_are_unavailable(self):
        now = datetime.combine(TARGET, datetime.min.time()) + timedelta(hours=12, minutes=10)
        slots = by_time(generate_slots(TARGET, 30, make_rule(), [], now=now))

        assert slots["09:00"]["available"] is False
        assert slots["12:00"]["available"] is False
        assert slots["12:30"]["available"] is True
        assert slots["16:30"]["available"] is True

    def test_past_dates_are_entirely_unavailable(self):
        now = datetime(2030, 6, 4, 8, 0)
        slots = generate_slots(TARGET, 30, make_rule(), [], now=now)

        assert len(slots) == 16
        assert not any(slot["available"] for slot in slots)

    def test_future_dates_are_not_affected_by_the_clock(self):
        now = datetime(2030, 6, 2, 23, 0)
        slots = generate_slots(TARGET, 30, make_rule(), [], now=now)

        assert all(slot["available"] for slot in slots)

    def test_blocked_time_disables_intersecting_slots(self):
        blocked = BlockedTime(
            start_datetime=datetime(2030, 6, 3, 13, 0),
            end_datetime=datetime(2030, 6, 3, 14, 0),
            reason="Lunch",
        )
        slots = by_time(generate_slots(TARGET, 30, make_rule(), [], blocked_times=[blocked], now=EARLIER))

        assert slots["12:30"]["available"] is True
        assert slots["13:00"]["available"] is False
        assert slots["13:30"]["available"] is False
        assert slots["14:00"]["available"] is True

    def test_multi_day_block_covers_the_whole_day(self):
        blocked = BlockedTime(
            start_datetime=datetime(2030, 6, 1, 0, 0),
            end_datetime=datetime(2030, 6, 5, 0, 0),
            reason="Vacation",
        )
        slots = generate_slots(TARGET, 30, make_rule(), [], blocked_times=[blocked], now=EARLIER)

        assert len(slots) == 16
        assert not any(slot["available"] for slot in slots)


class TestSlotService:

    def test_get_slots_reads_bookings_and_blocked_time(self, db, business, service, weekly_rules, monday):
        db.add(Booking(
            business_id=business.id,
            service_id=service.id,
            booking_date=monday,
            start_time="09:00",
            end_time="09:30",
            status="pending",
            customer_name="Ada",
            customer_email="ada@example.com",
        ))
        db.add(Booking(
            business_id=business.id,
            service_id=service.id,
            booking_date=monday,
            start_time="10:00",
            end_time="10:30",
            status="cancelled",
            customer_name="Bob",
            customer_email="bob@example.com",
        ))
        db.add(BlockedTime(
            business_id=business.id,
            start_datetime=datetime.combine(monday, datetime.min.time()) + timedelta(hours=15),
            end_datetime=datetime.combine(monday, datetime.min.time()) + timedelta(hours=17),
        ))
        db.commit()

        slots = by_time(SlotService.get_slots(db, business, service, monday))

        assert slots["09:00"]["available"] is False
        assert slots["10:00"]["available"] is True
        assert slots["15:00"]["available"] is False
        assert slots["14:30"]["available"] is True

    def test_get_slots_on_a_day_without_a_rule(self, db, business, service, weekly_rules, sunday):
        assert SlotService.get_slots(db, business, service, sunday) == []

    def test_other_businesses_bookings_are_ignored(self, db, business, other_business, service, weekly_rules, monday):
        db.add(Booking(
            business_id=other_business.id,
            service_id=service.id,
            booking_date=monday,
            start_time="09:00",
            end_time="09:30",
            status="confirmed",
            customer_name="Eve",
            customer_email="eve@example.com",
        ))
        db.commit()

        slots = by_time(SlotService.get_slots(db, business, service, monday))

        assert slots["09:00"]["available"] is True
