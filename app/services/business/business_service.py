# app/services/business/business_service.py
"""Tenant lookups: businesses by slug/owner and their services"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.business import Business
from app.models.service import Service
import logging

logger = logging.getLogger(__name__)


class BusinessService:
    """Handles business-related lookups"""

    @staticmethod
    def get_business_by_slug(db: Session, slug: str) -> Business:
        """Active business behind a public booking page"""
        business = db.query(Business).filter(
            Business.slug == slug,
            Business.is_active == True
        ).first()

        if not business:
            raise NotFoundError("Business not found")
        return business

    @staticmethod
    def get_business_by_owner(db: Session, owner_id: str) -> Optional[Business]:
        return db.query(Business).filter(Business.owner_id == owner_id).first()

    @staticmethod
    def get_service(db: Session, business_id: UUID, service_id: UUID) -> Optional[Service]:
        """Service by id, only if it belongs to the business"""
        return db.query(Service).filter(
            Service.id == service_id,
            Service.business_id == business_id
        ).first()

    @staticmethod
    def list_active_services(db: Session, business_id: UUID) -> List[Service]:
        return db.query(Service).filter(
            Service.business_id == business_id,
            Service.is_active == True
        ).order_by(Service.display_order, Service.created_at.desc()).all()
