from datetime import time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import create_access_token
from app.config.database import get_db
from app.main import app
from app.models import AvailabilityRule, Base, Customer, Salon


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def salon(db):
    salon = Salon(name="Blue Door Hair", timezone="America/Los_Angeles")
    db.add(salon)
    db.commit()
    db.refresh(salon)
    return salon


@pytest.fixture()
def other_salon(db):
    salon = Salon(name="Other Place", timezone="Europe/London")
    db.add(salon)
    db.commit()
    db.refresh(salon)
    return salon


@pytest.fixture()
def customer(db, salon):
    customer = Customer(salon_id=salon.id, name="Dana Reyes", email="dana@example.com", phone="555-0101")
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


def make_token(salon_id, role="OWNER"):
    return create_access_token({"sub": "owner-1", "salon_id": str(salon_id), "role": role})


@pytest.fixture()
def owner_headers(salon):
    return {"Authorization": f"Bearer {make_token(salon.id)}"}


@pytest.fixture()
def other_owner_headers(other_salon):
    return {"Authorization": f"Bearer {make_token(other_salon.id)}"}


def rule(day_of_week, start="09:00", end="11:00", slot_duration=60, is_working_day=True):
    """In-memory schedule row for slot generator tests"""
    start_h, start_m = (int(p) for p in start.split(":"))
    end_h, end_m = (int(p) for p in end.split(":"))
    return SimpleNamespace(
        day_of_week=day_of_week,
        is_working_day=is_working_day,
        start_time=time(start_h, start_m),
        end_time=time(end_h, end_m),
        slot_duration=slot_duration,
    )


@pytest.fixture()
def weekly_schedule(db, salon):
    """Every day 09:00-17:00 salon time, 60 minute slots"""
    def _create(start=time(9, 0), end=time(17, 0), slot_duration=60, days=range(7)):
        rules = [
            AvailabilityRule(
                salon_id=salon.id,
                day_of_week=day,
                is_working_day=True,
                start_time=start,
                end_time=end,
                slot_duration=slot_duration,
            )
            for day in days
        ]
        db.add_all(rules)
        db.commit()
        return rules

    return _create
