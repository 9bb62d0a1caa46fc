import logging
import random
import string
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from skybook.core.config import settings
from skybook.core.errors import ApiError, ConflictError, NotFoundError
from skybook.models.booking import Booking
from skybook.models.flight import Flight
from skybook.models.passenger import Passenger
from skybook.schemas.booking import BookingCreate, BookingUpdate

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "BK"
REFERENCE_CHARS = string.ascii_uppercase + string.digits


def make_booking_ref() -> str:
    return REFERENCE_PREFIX + "".join(random.choices(REFERENCE_CHARS, k=6))


def _allocate_booking_ref(db: Session) -> str:
    # booking_reference must be unique
    for _ in range(settings.BOOKING_REFERENCE_ATTEMPTS):
        ref = make_booking_ref()
        exists = db.query(Booking.id).filter(Booking.booking_reference == ref).first()
        if not exists:
            return ref
    raise ApiError(
        "Failed to generate unique booking reference",
        code="BOOKING_REFERENCE_GENERATION_FAILED",
        status_code=500,
    )


def take_seat(db: Session, flight_id: int) -> bool:
    """Decrement available_seats only while it is above zero. False when no row matched."""
    res = db.execute(
        update(Flight)
        .where(Flight.id == flight_id, Flight.available_seats > 0)
        .values(available_seats=Flight.available_seats - 1, updated_at=datetime.now(timezone.utc))
    )
    return res.rowcount == 1


def release_seat(db: Session, flight_id: int) -> bool:
    """Increment available_seats, never past total_seats. False when no row matched."""
    res = db.execute(
        update(Flight)
        .where(Flight.id == flight_id, Flight.available_seats < Flight.total_seats)
        .values(available_seats=Flight.available_seats + 1, updated_at=datetime.now(timezone.utc))
    )
    if res.rowcount != 1:
        logger.warning("Seat release skipped for flight %s (missing or already at capacity)", flight_id)
        return False
    return True


def get_booking(db: Session, booking_id: int, code: str = "NOT_FOUND") -> Booking:
    b = db.get(Booking, booking_id)
    if not b:
        raise NotFoundError("Booking not found", code=code)
    return b


def list_bookings(
    db: Session,
    status: Optional[str] = None,
    passenger_id: Optional[int] = None,
    flight_id: Optional[int] = None,
    search: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
) -> list[Booking]:
    q = db.query(Booking)
    if status:
        q = q.filter(Booking.status == status)
    if passenger_id is not None:
        q = q.filter(Booking.passenger_id == passenger_id)
    if flight_id is not None:
        q = q.filter(Booking.flight_id == flight_id)
    if search:
        q = q.filter(Booking.booking_reference.like(f"%{search}%"))
    return q.order_by(Booking.id.asc()).limit(limit).offset(offset).all()


def create_booking(db: Session, body: BookingCreate) -> Booking:
    flight = db.execute(
        select(Flight).where(Flight.id == body.flightId).with_for_update()
    ).scalar_one_or_none()
    if not flight:
        raise NotFoundError("Flight not found", code="FLIGHT_NOT_FOUND")

    if not db.get(Passenger, body.passengerId):
        raise NotFoundError("Passenger not found", code="PASSENGER_NOT_FOUND")

    if flight.available_seats <= 0:
        raise ConflictError("No available seats on this flight", code="NO_AVAILABLE_SEATS")

    ref = _allocate_booking_ref(db)
    now = datetime.now(timezone.utc)

    # seat decrement and booking insert commit together
    try:
        if not take_seat(db, flight.id):
            raise ConflictError("No available seats on this flight", code="NO_AVAILABLE_SEATS")
        booking = Booking(
            booking_reference=ref,
            flight_id=flight.id,
            passenger_id=body.passengerId,
            seat_number=body.seatNumber,
            booking_date=now,
            status=body.status or "pending",
            total_price=body.totalPrice,
            created_at=now,
            updated_at=now,
        )
        db.add(booking)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    logger.info("Booking %s created on flight %s seat %s", booking.booking_reference, flight.flight_number, booking.seat_number)
    return booking


def update_booking(db: Session, booking_id: int, body: BookingUpdate) -> Booking:
    booking = get_booking(db, booking_id)
    changes = body.model_dump(exclude_none=True)

    cancelling = changes.get("status") == "cancelled" and booking.status != "cancelled"
    try:
        if cancelling:
            # missing flight row: booking still cancels, nothing to give back
            if db.get(Flight, booking.flight_id):
                release_seat(db, booking.flight_id)
            else:
                logger.warning("Booking %s cancelled but flight %s no longer exists", booking.booking_reference, booking.flight_id)
        if "status" in changes:
            booking.status = changes["status"]
        if "seatNumber" in changes:
            booking.seat_number = changes["seatNumber"]
        booking.updated_at = datetime.now(timezone.utc)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    if cancelling:
        logger.info("Booking %s cancelled", booking.booking_reference)
    return booking


def delete_booking(db: Session, booking_id: int) -> int:
    booking = get_booking(db, booking_id)
    ref = booking.booking_reference

    try:
        # an already-cancelled booking gave its seat back when it was cancelled
        if booking.status != "cancelled":
            release_seat(db, booking.flight_id)
        db.delete(booking)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Booking %s deleted", ref)
    return booking_id
