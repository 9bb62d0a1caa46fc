from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skybook.db.session import get_db
from skybook.api.deps import page_limit
from skybook.schemas.common import MAX_DB_INT
from skybook.schemas.passenger import PassengerCreate, PassengerOut
from skybook.services.passenger_service import create_passenger, get_passenger, list_passengers

router = APIRouter(tags=["passengers"])

@router.get("/passengers", response_model=Union[PassengerOut, List[PassengerOut]])
def get_passengers(
    id: Optional[int] = Query(None, le=MAX_DB_INT),
    search: Optional[str] = None,
    limit: int = Depends(page_limit),
    offset: int = Query(0, ge=0, le=MAX_DB_INT),
    db: Session = Depends(get_db),
):
    """Single passenger when `id` is given, otherwise a page matching `search` on name or email."""
    if id is not None:
        return get_passenger(db, id)
    return list_passengers(db, search=search, limit=limit, offset=offset)

@router.post("/passengers", response_model=PassengerOut, status_code=201)
def post_passenger(body: PassengerCreate, db: Session = Depends(get_db)):
    return create_passenger(db, body)
