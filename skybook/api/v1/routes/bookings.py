from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from skybook.db.session import get_db
from skybook.api.deps import page_limit
from skybook.schemas.common import MAX_DB_INT
from skybook.schemas.booking import BookingCreate, BookingDeletedOut, BookingOut, BookingStatus, BookingUpdate
from skybook.services import booking_service

router = APIRouter(tags=["bookings"])

@router.get("/bookings", response_model=Union[BookingOut, List[BookingOut]])
def list_bookings(
    id: Optional[int] = Query(None, le=MAX_DB_INT),
    status: Optional[BookingStatus] = None,
    passengerId: Optional[int] = Query(None, le=MAX_DB_INT),
    flightId: Optional[int] = Query(None, le=MAX_DB_INT),
    search: Optional[str] = None,
    limit: int = Depends(page_limit),
    offset: int = Query(0, ge=0, le=MAX_DB_INT),
    db: Session = Depends(get_db),
):
    if id is not None:
        return booking_service.get_booking(db, id, code="BOOKING_NOT_FOUND")
    return booking_service.list_bookings(
        db,
        status=status,
        passenger_id=passengerId,
        flight_id=flightId,
        search=search,
        limit=limit,
        offset=offset,
    )

@router.post("/bookings", response_model=BookingOut, status_code=201)
def create_booking(body: BookingCreate, db: Session = Depends(get_db)):
    return booking_service.create_booking(db, body)

@router.get("/bookings/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    return booking_service.get_booking(db, booking_id)

@router.put("/bookings/{booking_id}", response_model=BookingOut)
def update_booking(body: BookingUpdate, booking_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    """Change status and/or seat. Moving into `cancelled` gives the seat back to the flight once."""
    return booking_service.update_booking(db, booking_id, body)

@router.delete("/bookings/{booking_id}", response_model=BookingDeletedOut)
def delete_booking(booking_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    deleted_id = booking_service.delete_booking(db, booking_id)
    return BookingDeletedOut(message="Booking cancelled successfully", bookingId=deleted_id)
