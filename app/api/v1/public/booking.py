# ============================================================================
# FILE: app/api/v1/public/booking.py
# Public booking page endpoints - addressed by business slug, no auth
# ============================================================================
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from uuid import UUID
import logging

from app.api.dependencies import get_booking_lock
from app.config.database import get_db
from app.core.exceptions import SchedulingError, ServerError, ValidationError
from app.schemas.availability import AvailabilityRuleResponse
from app.schemas.booking import BookingCreate, BookingResponse, PublicBookingResponse
from app.schemas.business import PublicBusinessResponse, ServiceResponse
from app.schemas.slots import SlotListResponse
from app.services.availability.availability_service import AvailabilityService
from app.services.availability.slot_generator import SlotService
from app.services.booking.booking_lock import BookingLock
from app.services.booking.booking_service import BookingService
from app.services.business.business_service import BusinessService
from app.utils.time_utils import parse_date

logger = logging.getLogger(__name__)
router = APIRouter(tags=["public-booking"])


@router.get("/business/{slug}", response_model=PublicBusinessResponse)
def get_public_business(slug: str, db: Session = Depends(get_db)):
    """
    Business shown on the booking page
    """
    return BusinessService.get_business_by_slug(db, slug)


@router.get("/services/{slug}", response_model=List[ServiceResponse])
def list_public_services(slug: str, db: Session = Depends(get_db)):
    """
    Active services a customer can book
    """
    business = BusinessService.get_business_by_slug(db, slug)
    return BusinessService.list_active_services(db, business.id)


@router.get("/availability/{slug}", response_model=List[AvailabilityRuleResponse])
def get_public_availability(slug: str, db: Session = Depends(get_db)):
    """
    Weekly schedule (7 entries, 0=Sunday first) for the date picker
    """
    business = BusinessService.get_business_by_slug(db, slug)
    return AvailabilityService.get_week(db, business.id)


@router.get("/slots/{slug}", response_model=SlotListResponse)
def get_public_slots(
        slug: str,
        service_id: UUID = Query(..., alias="serviceId"),
        target_date: date = Query(..., alias="date"),
        db: Session = Depends(get_db)
):
    """
    Slot grid for a service on a date. Unavailable slots are included with
    available=false so the page can render them disabled.
    """
    business = BusinessService.get_business_by_slug(db, slug)

    service = BusinessService.get_service(db, business.id, service_id)
    if not service or not service.is_active:
        raise ValidationError("Invalid service")

    slots = SlotService.get_slots(db, business, service, target_date)
    return SlotListResponse(
        date=target_date,
        service_id=service.id,
        service_duration=service.duration,
        slots=slots
    )


@router.get("/bookings/{slug}", response_model=List[PublicBookingResponse])
def list_public_bookings(
        slug: str,
        date_param: Optional[str] = Query(None, alias="date"),
        db: Session = Depends(get_db)
):
    """
    Occupied times for one day, without customer details
    """
    business = BusinessService.get_business_by_slug(db, slug)

    if not date_param:
        return []

    try:
        target_date = parse_date(date_param)
    except ValueError:
        raise ValidationError("Invalid date")

    return BookingService.list_public_bookings(db, business.id, target_date)


@router.post("/bookings/{slug}", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_public_booking(
        booking_data: BookingCreate,
        slug: str,
        lock: BookingLock = Depends(get_booking_lock),
        db: Session = Depends(get_db)
):
    """
    Book a slot. Answers 400 "Time slot not available" when the slot was
    taken (or blocked) since the page loaded; the customer can pick another.
    """
    business = BusinessService.get_business_by_slug(db, slug)

    try:
        return BookingService.create_booking(db, business, booking_data, lock)
    except SchedulingError:
        raise
    except Exception as e:
        logger.error(f"Error creating booking: {e}", exc_info=True)
        db.rollback()
        raise ServerError("Failed to create booking")
