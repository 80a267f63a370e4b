# app/models/business.py
"""
Business Model
Tenant root: every scheduling record is scoped by business_id.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(255), nullable=False, index=True)  # user id from the auth provider
    name = Column(String(200), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)  # public booking page
    description = Column(String(1000), nullable=True)

    # New bookings skip "pending" for services that don't require confirmation
    auto_confirm_bookings = Column(Boolean, default=False, nullable=False)

    services = relationship("Service", back_populates="business")

    # Technical fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Business(id={self.id}, slug={self.slug})>"
