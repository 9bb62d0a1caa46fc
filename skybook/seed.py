import logging
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError

from skybook.db.session import SessionLocal
from skybook.models.flight import Flight
from skybook.models.passenger import Passenger
from skybook.models.booking import Booking

logger = logging.getLogger(__name__)

# flight_number, airline, origin, destination, days from today, departure hour (UTC), duration hours, price, total seats
FLIGHTS = [
    ("DL101", "Delta Air Lines", "JFK", "LHR", 7, 18, 7, 650, 180),
    ("JL202", "Japan Airlines", "LAX", "NRT", 9, 11, 12, 850, 240),
    ("AF303", "Air France", "CDG", "JFK", 10, 9, 8, 720, 200),
    ("BA404", "British Airways", "LHR", "DXB", 12, 21, 7, 540, 220),
    ("EK505", "Emirates", "DXB", "SYD", 14, 2, 14, 1100, 350),
    ("LH606", "Lufthansa", "FRA", "JFK", 15, 13, 9, 690, 190),
]

PASSENGERS = [
    ("John", "Smith", "john.smith@gmail.com", "+1-555-0101", "US123456789", date(1989, 3, 15)),
    ("Sarah", "Johnson", "sarah.johnson@yahoo.com", "+1-555-0202", "US234567890", date(1985, 7, 22)),
    ("Michael", "Chen", "michael.chen@outlook.com", "+44-20-1234-5678", "GB987654321", date(1992, 11, 8)),
    ("Emily", "Rodriguez", "emily.rodriguez@gmail.com", "+1-555-0303", "US345678901", date(1978, 5, 14)),
    ("David", "Kim", "david.kim@gmail.com", "+82-2-555-0404", "KR456789012", date(1995, 1, 30)),
]

# booking_reference, flight_number, passenger email, seat, days ago, status
BOOKINGS = [
    ("BKAX7M2P", "DL101", "john.smith@gmail.com", "12A", 28, "confirmed"),
    ("BK3J9K1L", "DL101", "sarah.johnson@yahoo.com", "12B", 25, "confirmed"),
    ("BKQ5R8T2", "DL101", "michael.chen@outlook.com", "15C", 3, "pending"),
    ("BKL9M4N7", "JL202", "emily.rodriguez@gmail.com", "8B", 22, "confirmed"),
    ("BKP2W6X9", "JL202", "david.kim@gmail.com", "19D", 20, "confirmed"),
    ("BKT8V3Y1", "AF303", "john.smith@gmail.com", "23F", 18, "cancelled"),
]


def seed_flights(db: Session, today: date) -> dict[str, Flight]:
    out = {}
    for number, airline, origin, dest, days, hour, hours, price, seats in FLIGHTS:
        f = db.query(Flight).filter(Flight.flight_number == number).first()
        if not f:
            dep = datetime(today.year, today.month, today.day, hour, tzinfo=timezone.utc) + timedelta(days=days)
            f = Flight(
                flight_number=number,
                airline=airline,
                origin=origin,
                destination=dest,
                departure_time=dep,
                arrival_time=dep + timedelta(hours=hours),
                price=price,
                available_seats=seats,
                total_seats=seats,
                status="scheduled",
            )
            db.add(f)
        out[number] = f
    db.flush()
    return out


def seed_passengers(db: Session) -> dict[str, Passenger]:
    out = {}
    for first, last, email, phone, passport, dob in PASSENGERS:
        p = db.query(Passenger).filter(Passenger.email == email).first()
        if not p:
            p = Passenger(
                first_name=first,
                last_name=last,
                email=email,
                phone=phone,
                passport_number=passport,
                date_of_birth=dob,
            )
            db.add(p)
        out[email] = p
    db.flush()
    return out


def seed_bookings(db: Session, flights: dict[str, Flight], passengers: dict[str, Passenger]) -> int:
    now = datetime.now(timezone.utc)
    created = 0
    for ref, number, email, seat, days_ago, status in BOOKINGS:
        if db.query(Booking.id).filter(Booking.booking_reference == ref).first():
            continue
        flight = flights[number]
        db.add(Booking(
            booking_reference=ref,
            flight_id=flight.id,
            passenger_id=passengers[email].id,
            seat_number=seat,
            booking_date=now - timedelta(days=days_ago),
            status=status,
            total_price=flight.price,
        ))
        # cancelled seed rows never held a seat
        if status != "cancelled":
            flight.available_seats -= 1
        created += 1
    return created


def run(db=None):
    if db is None:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM flights LIMIT 1"))
        except (OperationalError, ProgrammingError):
            db.rollback()
            logger.warning("[seed] flights table not found yet. Skipping seeding (run alembic upgrade head).")
            return

        flights = seed_flights(db, datetime.now(timezone.utc).date())
        passengers = seed_passengers(db)
        created = seed_bookings(db, flights, passengers)
        db.commit()
        logger.info("[seed] %d flights, %d passengers, %d new bookings", len(flights), len(passengers), created)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
