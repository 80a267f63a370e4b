# app/models/availability.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func
from app.models.base import Base
import uuid

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "17:00"
DEFAULT_SLOT_DURATION = 30
DEFAULT_MAX_BOOKINGS_PER_SLOT = 1


class AvailabilityRule(Base):
    """Recurring weekly opening hours, one row per business and weekday"""
    __tablename__ = "availability_rules"
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_availability_business_day"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    is_open = Column(Boolean, default=False, nullable=False)
    start_time = Column(String(5), nullable=False, default=DEFAULT_START_TIME)  # HH:MM format
    end_time = Column(String(5), nullable=False, default=DEFAULT_END_TIME)  # HH:MM format
    slot_duration = Column(Integer, nullable=False, default=DEFAULT_SLOT_DURATION)  # grid step in minutes
    max_bookings_per_slot = Column(Integer, nullable=False, default=DEFAULT_MAX_BOOKINGS_PER_SLOT)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @classmethod
    def default_closed(cls, business_id, day_of_week: int) -> "AvailabilityRule":
        """Unsaved placeholder for a weekday without a stored rule"""
        return cls(
            business_id=business_id,
            day_of_week=day_of_week,
            is_open=False,
            start_time=DEFAULT_START_TIME,
            end_time=DEFAULT_END_TIME,
            slot_duration=DEFAULT_SLOT_DURATION,
            max_bookings_per_slot=DEFAULT_MAX_BOOKINGS_PER_SLOT,
        )

    def __repr__(self):
        return f"<AvailabilityRule(business_id={self.business_id}, day={self.day_of_week}, open={self.is_open})>"


class BlockedTime(Base):
    """Absolute date-time ranges (vacations, holidays) that override weekly hours"""
    __tablename__ = "blocked_times"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)

    # Naive wall-clock datetimes in the business' (ambient) timezone
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<BlockedTime(business_id={self.business_id}, {self.start_datetime} - {self.end_datetime})>"
