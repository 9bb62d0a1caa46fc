from datetime import datetime
from typing import List
from pydantic import BaseModel

from skybook.schemas.common import CamelOut

class FlightOut(CamelOut):
    id: int
    flight_number: str
    airline: str
    origin: str
    destination: str
    departure_time: datetime
    arrival_time: datetime
    price: int
    available_seats: int
    total_seats: int
    status: str
    created_at: datetime
    updated_at: datetime

class FlightListOut(BaseModel):
    flights: List[FlightOut]
    total: int
    limit: int
    offset: int
