# ============================================================================
# app/services/booking/booking_service.py
# Booking lifecycle: create (pending/confirmed), status changes, notes
# ============================================================================
"""Service for managing bookings"""
from contextlib import nullcontext
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import (
    NotFoundError,
    SchedulingError,
    TimeSlotUnavailableError,
    ValidationError,
)
from app.models.availability import BlockedTime
from app.models.booking import ACTIVE_STATUSES, Booking, BookingStatus
from app.models.business import Business
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services.availability.availability_service import AvailabilityService
from app.services.availability.blocked_time_service import BlockedTimeService
from app.services.booking.booking_lock import BookingLock
from app.services.booking.conflict_validator import ensure_available
from app.services.business.business_service import BusinessService
from app.utils.time_utils import add_minutes, combine, time_to_minutes
import logging

logger = logging.getLogger(__name__)


class BookingService:
    """Handles booking operations"""

    @staticmethod
    def create_booking(
            db: Session,
            business: Business,
            data: BookingCreate,
            lock: BookingLock,
            now: Optional[datetime] = None
    ) -> Booking:
        """
        Create a booking from the public booking page.

        The overlap/capacity check and the insert run while holding the
        (business, date) lock, so two requests for the same day are never
        validated against the same snapshot.

        Raises:
            ValidationError: unknown/foreign/inactive service, start >= end
            TimeSlotUnavailableError: closed, outside hours, past, blocked or full
        """
        service = BusinessService.get_service(db, business.id, data.service_id)
        if not service or not service.is_active:
            raise ValidationError("Invalid service")

        start_time = data.start_time
        if data.end_time:
            end_time = data.end_time
        else:
            try:
                end_time = add_minutes(start_time, service.duration)
            except ValueError:
                raise TimeSlotUnavailableError()

        if time_to_minutes(start_time) >= time_to_minutes(end_time):
            raise ValidationError("Start time must be before end time")

        now = now or datetime.now()
        if combine(data.booking_date, start_time) < now:
            raise TimeSlotUnavailableError()

        with lock.acquire(db, business.id, data.booking_date):
            try:
                capacity = BookingService._check_slot(
                    db, business.id, data.booking_date, start_time, end_time
                )

                booking = Booking(
                    business_id=business.id,
                    service_id=service.id,
                    booking_date=data.booking_date,
                    start_time=start_time,
                    end_time=end_time,
                    status=BookingService._initial_status(business, service),
                    customer_name=data.customer_name,
                    customer_email=data.customer_email,
                    customer_phone=data.customer_phone or None,
                    customer_notes=data.customer_notes or None,
                )
                db.add(booking)
                db.commit()
            except SchedulingError:
                db.rollback()
                raise
            except Exception as e:
                db.rollback()
                logger.error(f"Error creating booking for business {business.id}: {e}", exc_info=True)
                raise

        db.refresh(booking)
        logger.info(
            f"Created booking {booking.id} for business {business.id}: "
            f"{booking.booking_date} {start_time}-{end_time} ({booking.status}, capacity {capacity})"
        )
        return booking

    @staticmethod
    def update_booking(
            db: Session,
            business_id: UUID,
            booking_id: UUID,
            data: BookingUpdate,
            lock: BookingLock
    ) -> Booking:
        """
        Owner-side status/notes update. Any status may follow any other;
        moving a cancelled booking back to pending/confirmed re-checks the
        slot because it starts counting against capacity again.
        """
        booking = BookingService.get_booking(db, business_id, booking_id)

        new_status = data.status.value if data.status is not None else None
        reactivating = (
            new_status is not None
            and booking.is_cancelled
            and new_status != BookingStatus.CANCELLED.value
        )

        guard = lock.acquire(db, business_id, booking.booking_date) if reactivating else nullcontext()
        with guard:
            try:
                if reactivating:
                    BookingService._check_slot(
                        db, business_id, booking.booking_date,
                        booking.start_time, booking.end_time,
                        exclude_booking_id=booking.id
                    )

                if new_status is not None and new_status != booking.status:
                    booking.status = new_status
                    if new_status == BookingStatus.CANCELLED.value:
                        booking.cancelled_at = datetime.now(timezone.utc)
                    else:
                        booking.cancelled_at = None

                if "internal_notes" in data.model_fields_set:
                    booking.internal_notes = data.internal_notes

                db.commit()
            except SchedulingError:
                db.rollback()
                raise
            except Exception as e:
                db.rollback()
                logger.error(f"Error updating booking {booking_id}: {e}", exc_info=True)
                raise

        db.refresh(booking)
        logger.info(f"Updated booking {booking.id}: status={booking.status}")
        return booking

    @staticmethod
    def get_booking(db: Session, business_id: UUID, booking_id: UUID) -> Booking:
        """Booking by id; foreign bookings look exactly like missing ones"""
        booking = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.business_id == business_id
        ).first()

        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    @staticmethod
    def list_bookings(
            db: Session,
            business_id: UUID,
            booking_date: Optional[date] = None,
            status: Optional[str] = None
    ) -> List[Booking]:
        query = db.query(Booking).filter(Booking.business_id == business_id)

        if booking_date:
            query = query.filter(Booking.booking_date == booking_date)
        if status:
            query = query.filter(Booking.status == status)

        return query.order_by(Booking.booking_date.desc(), Booking.start_time.asc()).all()

    @staticmethod
    def list_public_bookings(db: Session, business_id: UUID, target_date: date) -> List[Booking]:
        """Bookings of one day for the public page (serialized without customer fields)"""
        return db.query(Booking).filter(
            Booking.business_id == business_id,
            Booking.booking_date == target_date
        ).order_by(Booking.start_time.asc()).all()

    @staticmethod
    def dashboard_summary(
            db: Session,
            business_id: UUID,
            now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Counts for the owner dashboard, including upcoming blocked time"""
        now = now or datetime.now()
        today = now.date()

        active = db.query(Booking).filter(
            Booking.business_id == business_id,
            Booking.status.in_(ACTIVE_STATUSES),
            Booking.booking_date >= today
        ).all()

        upcoming_blocked = db.query(BlockedTime).filter(
            BlockedTime.business_id == business_id,
            BlockedTime.end_datetime > now
        ).order_by(BlockedTime.start_datetime.asc()).all()

        return {
            "date": today,
            "todays_bookings": sum(1 for b in active if b.booking_date == today),
            "upcoming_bookings": len(active),
            "pending_bookings": sum(1 for b in active if b.status == BookingStatus.PENDING.value),
            "upcoming_blocked_times": len(upcoming_blocked),
            "next_blocked_time": upcoming_blocked[0].start_datetime if upcoming_blocked else None,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_slot(
            db: Session,
            business_id: UUID,
            booking_date: date,
            start_time: str,
            end_time: str,
            exclude_booking_id: Optional[UUID] = None
    ) -> int:
        """Validate against hours, blocked time and capacity; returns the day's capacity"""
        rule = AvailabilityService.get_rule_for_date(db, business_id, booking_date)
        if not rule.is_open:
            raise TimeSlotUnavailableError()

        if (time_to_minutes(start_time) < time_to_minutes(rule.start_time)
                or time_to_minutes(end_time) > time_to_minutes(rule.end_time)):
            raise TimeSlotUnavailableError()

        existing = db.query(Booking).filter(
            Booking.business_id == business_id,
            Booking.booking_date == booking_date,
            Booking.status.in_(ACTIVE_STATUSES)
        ).all()
        blocked_times = BlockedTimeService.list_for_date(db, business_id, booking_date)

        ensure_available(
            start_time,
            end_time,
            existing,
            capacity=rule.max_bookings_per_slot,
            blocked_times=blocked_times,
            booking_date=booking_date,
            exclude_booking_id=exclude_booking_id,
        )
        return rule.max_bookings_per_slot

    @staticmethod
    def _initial_status(business: Business, service) -> str:
        if business.auto_confirm_bookings and not service.requires_confirmation:
            return BookingStatus.CONFIRMED.value
        return BookingStatus.PENDING.value
