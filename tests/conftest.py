"""
Shared fixtures: a fresh SQLite database per test, a session bound to it and
a TestClient whose get_db dependency points at the same database.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bus_booking.database import Base, get_db
from bus_booking.main import app
from bus_booking.models import Bus, Station, TravelSchedule, User


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
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
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def world(db):
    """Stations NYC/BOS/PHL, buses #7 and #8 and one user"""
    stations = {
        code: Station(station_code=code, name=name)
        for code, name in [
            ("NYC", "New York"),
            ("BOS", "Boston"),
            ("PHL", "Philadelphia"),
        ]
    }
    db.add_all(stations.values())
    buses = {
        7: Bus(id=7, bus_number="BUS-7", operator_name="Northeast Coach", capacity=40),
        8: Bus(id=8, bus_number="BUS-8", operator_name="Northeast Coach", capacity=40),
    }
    db.add_all(buses.values())
    user = User(name="Traveller", email="traveller@example.com")
    db.add(user)
    db.commit()
    return {"stations": stations, "buses": buses, "user": user}


@pytest.fixture
def make_schedule(db, world):
    """Insert a schedule directly, bypassing the create rules"""

    def _make(
        departure,
        duration=timedelta(hours=4),
        source="NYC",
        destination="BOS",
        bus_id=7,
        total_seat=40,
        seat_booked=0,
        seat_cost=Decimal("100.00"),
    ):
        schedule = TravelSchedule(
            source_id=world["stations"][source].id,
            destination_id=world["stations"][destination].id,
            bus_id=bus_id,
            estimated_departure_time=departure,
            estimated_arrival_time=departure + duration,
            total_seat=total_seat,
            seat_booked=seat_booked,
            available_seat=total_seat - seat_booked,
            seat_cost=seat_cost,
        )
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    return _make

