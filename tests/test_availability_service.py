"""
Tests for weekly availability rules.
"""
import pytest

from app.core.exceptions import ValidationError
from app.models.availability import AvailabilityRule
from app.schemas.availability import AvailabilityRuleUpsert
from app.services.availability.availability_service import AvailabilityService


class TestAvailabilityService:

    def test_unconfigured_week_is_closed(self, db, business):
        week = AvailabilityService.get_week(db, business.id)

        assert [rule.day_of_week for rule in week] == list(range(7))
        assert all(not rule.is_open for rule in week)
        assert all(rule.id is None for rule in week)
        assert week[0].start_time == "09:00"
        assert week[0].end_time == "17:00"
        assert week[0].slot_duration == 30
        assert week[0].max_bookings_per_slot == 1

    def test_week_mixes_stored_rules_and_defaults(self, db, business, weekly_rules):
        week = AvailabilityService.get_week(db, business.id)

        assert not week[0].is_open
        assert all(rule.is_open for rule in week[1:])

    def test_upsert_creates_a_rule(self, db, business):
        rule = AvailabilityService.upsert_rule(db, business.id, AvailabilityRuleUpsert(
            day_of_week=2,
            is_open=True,
            start_time="10:00",
            end_time="18:00",
            slot_duration=15,
        ))

        assert rule.id is not None
        assert rule.max_bookings_per_slot == 1
        assert AvailabilityService.get_rule(db, business.id, 2).start_time == "10:00"

    def test_upsert_updates_in_place(self, db, business):
        first = AvailabilityService.upsert_rule(db, business.id, AvailabilityRuleUpsert(
            day_of_week=3, is_open=True, max_bookings_per_slot=3
        ))
        second = AvailabilityService.upsert_rule(db, business.id, AvailabilityRuleUpsert(
            day_of_week=3, is_open=True, start_time="08:00", end_time="12:00"
        ))

        assert second.id == first.id
        assert second.start_time == "08:00"
        # Capacity left out keeps the stored value
        assert second.max_bookings_per_slot == 3
        assert db.query(AvailabilityRule).filter(AvailabilityRule.business_id == business.id).count() == 1

    def test_open_day_needs_start_before_end(self, db, business):
        with pytest.raises(ValidationError):
            AvailabilityService.upsert_rule(db, business.id, AvailabilityRuleUpsert(
                day_of_week=1, is_open=True, start_time="17:00", end_time="09:00"
            ))

    def test_closed_day_ignores_hours(self, db, business):
        rule = AvailabilityService.upsert_rule(db, business.id, AvailabilityRuleUpsert(
            day_of_week=1, is_open=False, start_time="17:00", end_time="09:00"
        ))

        assert not rule.is_open

    def test_rules_are_scoped_by_business(self, db, business, other_business, weekly_rules):
        assert not AvailabilityService.get_rule(db, other_business.id, 1).is_open

    def test_rule_for_date(self, db, business, weekly_rules, monday, sunday):
        assert AvailabilityService.get_rule_for_date(db, business.id, monday).day_of_week == 1
        assert not AvailabilityService.get_rule_for_date(db, business.id, sunday).is_open

    def test_schema_rejects_bad_input(self):
        with pytest.raises(ValueError):
            AvailabilityRuleUpsert(day_of_week=7)
        with pytest.raises(ValueError):
            AvailabilityRuleUpsert(day_of_week=1, start_time="9am")
        with pytest.raises(ValueError):
            AvailabilityRuleUpsert(day_of_week=1, max_bookings_per_slot=0)
