from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from skybook.core.errors import BadRequestError, NotFoundError
from skybook.models.flight import Flight


def utc_day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start, end) of `day` as a UTC calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def normalize_airport_code(value: Optional[str], field: str) -> Optional[str]:
    if value is None:
        return None
    code = value.strip().upper()
    if not code:
        return None
    if len(code) != 3 or not code.isalpha():
        raise BadRequestError(
            f"{field.capitalize()} must be a 3-letter IATA airport code",
            code=f"INVALID_{field.upper()}",
        )
    return code


def get_flight(db: Session, flight_id: int) -> Flight:
    f = db.get(Flight, flight_id)
    if not f:
        raise NotFoundError("Flight not found", code="FLIGHT_NOT_FOUND")
    return f


def search_flights(
    db: Session,
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    day: Optional[date] = None,
    passengers: Optional[int] = None,
    search: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Flight], int]:
    """Filtered page of flights ordered by departure, plus the total match count."""
    origin = normalize_airport_code(origin, "origin")
    destination = normalize_airport_code(destination, "destination")

    q = db.query(Flight)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(Flight.flight_number.like(like), Flight.airline.like(like)))
    if origin:
        q = q.filter(Flight.origin == origin)
    if destination:
        q = q.filter(Flight.destination == destination)
    if day:
        start, end = utc_day_bounds(day)
        q = q.filter(Flight.departure_time >= start, Flight.departure_time < end)
    if passengers:
        q = q.filter(Flight.available_seats >= passengers)

    total = q.with_entities(func.count(Flight.id)).scalar() or 0
    items = q.order_by(Flight.departure_time.asc(), Flight.id.asc()).limit(limit).offset(offset).all()
    return items, total
