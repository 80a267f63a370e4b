# ============================================================================
# app/api/v1/dashboard/bookings.py
# Owner endpoints - thin HTTP layer over BookingService
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID
import logging

from app.api.dependencies import get_booking_lock, get_current_business
from app.config.database import get_db
from app.core.exceptions import SchedulingError, ServerError
from app.models.booking import BookingStatus
from app.models.business import Business
from app.schemas.booking import (
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
    DashboardSummaryResponse,
)
from app.services.booking.booking_lock import BookingLock
from app.services.booking.booking_service import BookingService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-bookings"])


@router.get("/bookings", response_model=BookingListResponse)
def list_bookings(
        booking_date: Optional[date] = Query(None, alias="date", description="Only bookings on this date"),
        status: Optional[BookingStatus] = Query(None, description="Filter by status (pending, confirmed, cancelled)"),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Get all bookings for your business, newest date first.
    """
    bookings = BookingService.list_bookings(
        db,
        business.id,
        booking_date=booking_date,
        status=status.value if status else None
    )
    return BookingListResponse(
        total=len(bookings),
        bookings=[BookingResponse.model_validate(b) for b in bookings]
    )


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
def get_booking(
        booking_id: UUID = Path(..., description="The booking ID"),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Get a single booking with customer details and internal notes.
    """
    return BookingService.get_booking(db, business.id, booking_id)


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
def update_booking(
        update_data: BookingUpdate,
        booking_id: UUID = Path(..., description="The booking ID"),
        business: Business = Depends(get_current_business),
        lock: BookingLock = Depends(get_booking_lock),
        db: Session = Depends(get_db)
):
    """
    Confirm, cancel or annotate a booking.
    """
    try:
        return BookingService.update_booking(db, business.id, booking_id, update_data, lock)
    except SchedulingError:
        raise
    except Exception as e:
        logger.error(f"Error updating booking: {e}", exc_info=True)
        db.rollback()
        raise ServerError("Failed to update booking")


@router.get("/summary", response_model=DashboardSummaryResponse)
def get_dashboard_summary(
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Today's and upcoming booking counts plus upcoming blocked time.
    """
    return BookingService.dashboard_summary(db, business.id)
