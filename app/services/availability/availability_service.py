# ===== app/services/availability/availability_service.py =====
"""Weekly availability rules: one rule per business and weekday"""
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.models.availability import AvailabilityRule, DEFAULT_MAX_BOOKINGS_PER_SLOT
from app.schemas.availability import AvailabilityRuleUpsert
from app.utils.time_utils import day_of_week, time_to_minutes
import logging

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Reads and upserts the recurring weekly schedule of a business"""

    @staticmethod
    def get_rule(db: Session, business_id: UUID, weekday: int) -> AvailabilityRule:
        """
        Stored rule for the weekday, or an unsaved closed default.
        A missing rule is not an error: the day is simply closed.
        """
        rule = db.query(AvailabilityRule).filter(
            AvailabilityRule.business_id == business_id,
            AvailabilityRule.day_of_week == weekday
        ).first()

        if rule is None:
            return AvailabilityRule.default_closed(business_id, weekday)
        return rule

    @staticmethod
    def get_rule_for_date(db: Session, business_id: UUID, target_date: date) -> AvailabilityRule:
        return AvailabilityService.get_rule(db, business_id, day_of_week(target_date))

    @staticmethod
    def get_week(db: Session, business_id: UUID) -> List[AvailabilityRule]:
        """All seven weekdays (0=Sunday first), defaults filled in"""
        rules = db.query(AvailabilityRule).filter(
            AvailabilityRule.business_id == business_id
        ).all()
        by_day = {rule.day_of_week: rule for rule in rules}

        return [
            by_day.get(weekday) or AvailabilityRule.default_closed(business_id, weekday)
            for weekday in range(7)
        ]

    @staticmethod
    def upsert_rule(
            db: Session,
            business_id: UUID,
            data: AvailabilityRuleUpsert
    ) -> AvailabilityRule:
        """Create the weekday's rule or overwrite it in place"""
        if data.is_open and time_to_minutes(data.start_time) >= time_to_minutes(data.end_time):
            raise ValidationError("Start time must be before end time")

        rule: Optional[AvailabilityRule] = db.query(AvailabilityRule).filter(
            AvailabilityRule.business_id == business_id,
            AvailabilityRule.day_of_week == data.day_of_week
        ).first()

        if rule is None:
            rule = AvailabilityRule(
                business_id=business_id,
                day_of_week=data.day_of_week,
                max_bookings_per_slot=DEFAULT_MAX_BOOKINGS_PER_SLOT,
            )
            db.add(rule)
            action = "Created"
        else:
            action = "Updated"

        rule.is_open = data.is_open
        rule.start_time = data.start_time
        rule.end_time = data.end_time
        rule.slot_duration = data.slot_duration
        if data.max_bookings_per_slot is not None:
            rule.max_bookings_per_slot = data.max_bookings_per_slot

        db.commit()
        db.refresh(rule)

        logger.info(
            f"{action} availability rule for business {business_id} day {rule.day_of_week}: "
            f"open={rule.is_open} {rule.start_time}-{rule.end_time} "
            f"step={rule.slot_duration} capacity={rule.max_bookings_per_slot}"
        )
        return rule
