# app/models/booking.py
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
import enum
import uuid
from app.models.base import Base


class BookingStatus(str, enum.Enum):
    """Booking lifecycle states. Cancelled bookings are kept for history."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_business_date", "business_id", "booking_date"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=False)

    # Slot
    booking_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM format
    end_time = Column(String(5), nullable=False)  # HH:MM format

    # Status tracking
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)

    # Customer info
    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    customer_notes = Column(Text, nullable=True)

    # Visible to the business only
    internal_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED.value

    def __repr__(self):
        return f"<Booking(id={self.id}, {self.booking_date} {self.start_time}-{self.end_time}, {self.status})>"
