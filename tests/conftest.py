"""
Shared fixtures: a throwaway SQLite database per test, a seeded business
and a TestClient wired to the same database.
"""
import os

# Must be set before app.config.settings is first imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BOOKING_LOCK_BACKEND"] = "local"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.dependencies import create_access_token
from app.config.database import build_engine, get_db
from app.main import app
from app.models import AvailabilityRule, Base, Business, Service
from app.utils.time_utils import day_of_week


def upcoming(weekday: int, min_days: int = 7) -> date:
    """First date at least `min_days` ahead falling on `weekday` (0=Sunday)"""
    target = date.today() + timedelta(days=min_days)
    while day_of_week(target) != weekday:
        target += timedelta(days=1)
    return target


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def business(db):
    business = Business(
        owner_id="owner-1",
        name="Test Studio",
        slug="test-studio",
        auto_confirm_bookings=False,
    )
    db.add(business)
    db.commit()
    db.refresh(business)
    return business


@pytest.fixture
def other_business(db):
    business = Business(owner_id="owner-2", name="Other Studio", slug="other-studio")
    db.add(business)
    db.commit()
    db.refresh(business)
    return business


@pytest.fixture
def service(db, business):
    service = Service(
        business_id=business.id,
        name="Haircut",
        price=Decimal("35.00"),
        duration=30,
        requires_confirmation=True,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def weekly_rules(db, business):
    """Monday-Saturday 09:00-17:00, 30 minute grid, one booking per slot; Sunday has no rule"""
    rules = [
        AvailabilityRule(
            business_id=business.id,
            day_of_week=weekday,
            is_open=True,
            start_time="09:00",
            end_time="17:00",
            slot_duration=30,
            max_bookings_per_slot=1,
        )
        for weekday in range(1, 7)
    ]
    db.add_all(rules)
    db.commit()
    return rules


@pytest.fixture
def monday():
    return upcoming(1)


@pytest.fixture
def sunday():
    return upcoming(0)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(business):
    token = create_access_token({"sub": business.owner_id})
    return {"Authorization": f"Bearer {token}"}
