#!/usr/bin/env python3
"""
Script to create a demo business with services and weekly availability
Usage: python -m app.scripts.create_business [owner_id]
"""
import sys
from decimal import Decimal
from sqlalchemy.orm import Session

from app.api.dependencies import create_access_token
from app.config.database import SessionLocal
from app.models.availability import AvailabilityRule
from app.models.business import Business
from app.models.service import Service


def create_business_with_availability(owner_id: str = "demo-owner"):
    """Create a demo business with services and opening hours"""
    db: Session = SessionLocal()

    try:
        business = Business(
            owner_id=owner_id,
            name="Sunset Hair Studio",
            slug="sunset-hair-studio",
            description="Cuts, colour and styling",
            auto_confirm_bookings=True,
        )
        db.add(business)
        db.flush()  # Get the ID without committing

        print(f"\n✅ Created business: {business.name}")
        print(f"   Business ID: {business.id}")
        print(f"   Booking page slug: {business.slug}")

        services = [
            {"name": "Haircut", "duration": 30, "price": Decimal("35.00"), "requires_confirmation": False},
            {"name": "Colour", "duration": 90, "price": Decimal("120.00"), "requires_confirmation": True},
            {"name": "Blow-dry", "duration": 45, "price": Decimal("40.00"), "requires_confirmation": False},
        ]
        for order, service_data in enumerate(services):
            db.add(Service(business_id=business.id, display_order=order, **service_data))

        # Weekly availability (Sunday=0, Saturday=6)
        weekly_hours = [
            {"day_of_week": 0, "is_open": False, "start_time": "09:00", "end_time": "17:00"},  # Sunday
            {"day_of_week": 1, "is_open": True, "start_time": "09:00", "end_time": "18:00"},   # Monday
            {"day_of_week": 2, "is_open": True, "start_time": "09:00", "end_time": "18:00"},   # Tuesday
            {"day_of_week": 3, "is_open": True, "start_time": "09:00", "end_time": "18:00"},   # Wednesday
            {"day_of_week": 4, "is_open": True, "start_time": "09:00", "end_time": "20:00"},   # Thursday
            {"day_of_week": 5, "is_open": True, "start_time": "09:00", "end_time": "18:00"},   # Friday
            {"day_of_week": 6, "is_open": True, "start_time": "10:00", "end_time": "16:00"},   # Saturday
        ]
        for hours_data in weekly_hours:
            db.add(AvailabilityRule(
                business_id=business.id,
                slot_duration=30,
                max_bookings_per_slot=2,
                **hours_data
            ))

        db.commit()

        print(f"\n✅ Created {len(services)} services and {len(weekly_hours)} availability rules")
        print("\n" + "=" * 60)
        print("BUSINESS CREATED SUCCESSFULLY!")
        print("=" * 60)
        print(f"\nPublic page:     /api/v1/public/business/{business.slug}")
        print(f"Dashboard token: {create_access_token({'sub': owner_id})}")
        print()

        return str(business.id)

    except Exception as e:
        db.rollback()
        print(f"\n❌ Error creating business: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_business_with_availability(*sys.argv[1:2])
