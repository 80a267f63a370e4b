# ============================================================================
# app/api/v1/dashboard/availability.py
# Weekly availability and blocked time management for the business owner
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from app.api.dependencies import get_current_business
from app.config.database import get_db
from app.core.exceptions import SchedulingError, ServerError
from app.models.business import Business
from app.schemas.availability import (
    AvailabilityRuleResponse,
    AvailabilityRuleUpsert,
    BlockedTimeCreate,
    BlockedTimeResponse,
)
from app.services.availability.availability_service import AvailabilityService
from app.services.availability.blocked_time_service import BlockedTimeService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-availability"])


# ============================================================================
# Weekly Availability
# ============================================================================

@router.get("/availability", response_model=List[AvailabilityRuleResponse])
def get_availability(
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Get the weekly schedule (7 entries, 0=Sunday first).
    Days that were never configured come back closed with default hours.
    """
    return AvailabilityService.get_week(db, business.id)


@router.post("/availability", response_model=AvailabilityRuleResponse)
def save_availability(
        rule_data: AvailabilityRuleUpsert,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Create or update the rule for one weekday
    """
    try:
        return AvailabilityService.upsert_rule(db, business.id, rule_data)
    except SchedulingError:
        raise
    except Exception as e:
        logger.error(f"Error saving availability: {e}", exc_info=True)
        db.rollback()
        raise ServerError("Failed to save availability")


# ============================================================================
# Blocked Times
# ============================================================================

@router.get("/blocked-times", response_model=List[BlockedTimeResponse])
def list_blocked_times(
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    List blocked time ranges, latest first
    """
    return BlockedTimeService.list_for_business(db, business.id)


@router.post("/blocked-times", response_model=BlockedTimeResponse, status_code=status.HTTP_201_CREATED)
def create_blocked_time(
        blocked_data: BlockedTimeCreate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Block a date-time range (vacation, holiday). Slots intersecting it
    become unavailable and bookings into it are rejected.
    """
    try:
        return BlockedTimeService.create(
            db,
            business.id,
            start_datetime=blocked_data.start_datetime,
            end_datetime=blocked_data.end_datetime,
            reason=blocked_data.reason,
        )
    except SchedulingError:
        raise
    except Exception as e:
        logger.error(f"Error creating blocked time: {e}", exc_info=True)
        db.rollback()
        raise ServerError("Failed to create blocked time")


@router.delete("/blocked-times/{blocked_time_id}")
def delete_blocked_time(
        blocked_time_id: UUID,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Remove a blocked time range
    """
    try:
        BlockedTimeService.delete(db, business.id, blocked_time_id)
        return {"success": True}
    except SchedulingError:
        raise
    except Exception as e:
        logger.error(f"Error deleting blocked time: {e}", exc_info=True)
        db.rollback()
        raise ServerError("Failed to delete blocked time")
