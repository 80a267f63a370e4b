# ===== app/services/availability/blocked_time_service.py =====
"""Ad-hoc blocked ranges (vacations, holidays) that override weekly hours"""
from datetime import date, datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidRangeError, NotFoundError
from app.models.availability import BlockedTime
from app.utils.time_utils import ranges_overlap, to_wall_clock
import logging

logger = logging.getLogger(__name__)


class BlockedTimeService:

    @staticmethod
    def create(
            db: Session,
            business_id: UUID,
            start_datetime: datetime,
            end_datetime: datetime,
            reason: Optional[str] = None
    ) -> BlockedTime:
        start_datetime = to_wall_clock(start_datetime)
        end_datetime = to_wall_clock(end_datetime)

        if start_datetime >= end_datetime:
            raise InvalidRangeError("Blocked time must start before it ends")

        blocked = BlockedTime(
            business_id=business_id,
            start_datetime=start_datetime,
            end_datetime=end_datetime,
            reason=reason,
        )
        db.add(blocked)
        db.commit()
        db.refresh(blocked)

        logger.info(f"Blocked {start_datetime} - {end_datetime} for business {business_id} ({reason})")
        return blocked

    @staticmethod
    def list_for_business(db: Session, business_id: UUID) -> List[BlockedTime]:
        """All blocked ranges, latest start first"""
        return db.query(BlockedTime).filter(
            BlockedTime.business_id == business_id
        ).order_by(BlockedTime.start_datetime.desc()).all()

    @staticmethod
    def list_for_window(
            db: Session,
            business_id: UUID,
            window_start: datetime,
            window_end: datetime
    ) -> List[BlockedTime]:
        """Blocked ranges intersecting [window_start, window_end)"""
        return db.query(BlockedTime).filter(
            BlockedTime.business_id == business_id,
            BlockedTime.start_datetime < window_end,
            BlockedTime.end_datetime > window_start
        ).order_by(BlockedTime.start_datetime.asc()).all()

    @staticmethod
    def list_for_date(db: Session, business_id: UUID, target_date: date) -> List[BlockedTime]:
        day_start = datetime.combine(target_date, datetime.min.time())
        return BlockedTimeService.list_for_window(
            db, business_id, day_start, day_start + timedelta(days=1)
        )

    @staticmethod
    def delete(db: Session, business_id: UUID, blocked_time_id: UUID) -> None:
        blocked = db.query(BlockedTime).filter(
            BlockedTime.id == blocked_time_id,
            BlockedTime.business_id == business_id
        ).first()

        if not blocked:
            raise NotFoundError("Blocked time not found")

        db.delete(blocked)
        db.commit()
        logger.info(f"Removed blocked time {blocked_time_id} for business {business_id}")

    @staticmethod
    def overlaps(blocked: BlockedTime, window_start: datetime, window_end: datetime) -> bool:
        return ranges_overlap(blocked.start_datetime, blocked.end_datetime, window_start, window_end)
