import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skybook.core.errors import ConflictError, NotFoundError
from skybook.models.passenger import Passenger
from skybook.schemas.passenger import PassengerCreate

logger = logging.getLogger(__name__)


def _duplicate_error(db: Session, email: str, passport_number: str) -> Optional[ConflictError]:
    if db.query(Passenger.id).filter(Passenger.email == email).first():
        return ConflictError("Email already exists", code="DUPLICATE_EMAIL")
    if db.query(Passenger.id).filter(Passenger.passport_number == passport_number).first():
        return ConflictError("Passport number already exists", code="DUPLICATE_PASSPORT_NUMBER")
    return None


def get_passenger(db: Session, passenger_id: int) -> Passenger:
    p = db.get(Passenger, passenger_id)
    if not p:
        raise NotFoundError("Passenger not found", code="PASSENGER_NOT_FOUND")
    return p


def list_passengers(db: Session, search: Optional[str] = None, limit: int = 10, offset: int = 0) -> list[Passenger]:
    q = db.query(Passenger)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            Passenger.first_name.like(like),
            Passenger.last_name.like(like),
            Passenger.email.like(like),
        ))
    return q.order_by(Passenger.id.asc()).limit(limit).offset(offset).all()


def create_passenger(db: Session, body: PassengerCreate) -> Passenger:
    dup = _duplicate_error(db, body.email, body.passportNumber)
    if dup:
        raise dup

    now = datetime.now(timezone.utc)
    p = Passenger(
        first_name=body.firstName,
        last_name=body.lastName,
        email=body.email,
        phone=body.phone,
        passport_number=body.passportNumber,
        date_of_birth=body.dateOfBirth,
        created_at=now,
        updated_at=now,
    )
    db.add(p)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent insert; the unique indexes caught it
        db.rollback()
        dup = _duplicate_error(db, body.email, body.passportNumber)
        if dup:
            raise dup
        raise
    db.refresh(p)
    logger.info("Passenger %s created", p.id)
    return p
