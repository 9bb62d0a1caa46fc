"""Pytest configuration and fixtures."""
import itertools
import os
from datetime import date, datetime, timedelta, timezone

# settings are read at import time; keep tests off any real database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import skybook.models  # noqa: F401  (register tables on Base.metadata)
from skybook.db.session import Base, get_db, make_engine
from skybook.main import app
from skybook.models.booking import Booking
from skybook.models.flight import Flight
from skybook.models.passenger import Passenger


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database per test."""
    eng = make_engine("sqlite://")
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db(session_factory):
    """Session for arranging rows and inspecting them after requests."""
    s = session_factory()
    yield s
    s.close()


@pytest.fixture(scope="function")
def client(session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_flight(db):
    counter = itertools.count(1)

    def _make(**kw):
        n = next(counter)
        dep = kw.pop("departure_time", datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc))
        data = dict(
            flight_number=f"TS{100 + n}",
            airline="Test Air",
            origin="JFK",
            destination="LHR",
            departure_time=dep,
            arrival_time=dep + timedelta(hours=7),
            price=500,
            available_seats=10,
            total_seats=10,
            status="scheduled",
        )
        data.update(kw)
        f = Flight(**data)
        db.add(f)
        db.commit()
        db.refresh(f)
        return f

    return _make


@pytest.fixture(scope="function")
def make_passenger(db):
    counter = itertools.count(1)

    def _make(**kw):
        n = next(counter)
        data = dict(
            first_name="John",
            last_name="Doe",
            email=f"john{n}@example.com",
            phone="+1234567890",
            passport_number=f"AB{n:06d}",
            date_of_birth=date(1990, 1, 1),
        )
        data.update(kw)
        p = Passenger(**data)
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make


@pytest.fixture(scope="function")
def make_booking(db):
    """Insert a booking row directly; does not touch the flight's seat counter."""
    counter = itertools.count(1)

    def _make(flight, passenger, **kw):
        n = next(counter)
        data = dict(
            booking_reference=f"BKTEST{n:02d}",
            flight_id=flight.id,
            passenger_id=passenger.id,
            seat_number=f"{n}A",
            status="confirmed",
            total_price=flight.price,
        )
        data.update(kw)
        b = Booking(**data)
        db.add(b)
        db.commit()
        db.refresh(b)
        return b

    return _make


@pytest.fixture(scope="function")
def seats(db):
    """Current available_seats of a flight as committed by the API."""
    def _seats(flight_id: int) -> int:
        db.expire_all()
        return db.get(Flight, flight_id).available_seats

    return _seats
