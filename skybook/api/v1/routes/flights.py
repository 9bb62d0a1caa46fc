from datetime import date
from typing import Optional, Union

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from skybook.db.session import get_db
from skybook.api.deps import page_limit
from skybook.schemas.common import MAX_DB_INT
from skybook.schemas.flight import FlightListOut, FlightOut
from skybook.services.flight_service import get_flight, search_flights

router = APIRouter(tags=["flights"])

@router.get("/flights", response_model=Union[FlightOut, FlightListOut])
def list_flights(
    id: Optional[int] = Query(None, le=MAX_DB_INT),
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    date: Optional[date] = None,
    passengers: Optional[int] = Query(None, ge=1, le=MAX_DB_INT),
    search: Optional[str] = None,
    limit: int = Depends(page_limit),
    offset: int = Query(0, ge=0, le=MAX_DB_INT),
    db: Session = Depends(get_db),
):
    """Search scheduled flights. `date` matches departures within that UTC day; `passengers` needs that many free seats."""
    if id is not None:
        return get_flight(db, id)
    items, total = search_flights(
        db,
        origin=origin,
        destination=destination,
        day=date,
        passengers=passengers,
        search=search,
        limit=limit,
        offset=offset,
    )
    return FlightListOut(flights=items, total=total, limit=limit, offset=offset)

@router.get("/flights/{flight_id}", response_model=FlightOut)
def get_flight_by_id(flight_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    return get_flight(db, flight_id)
