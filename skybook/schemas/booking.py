import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from skybook.schemas.common import MAX_DB_INT, CamelOut, drop_blank

SEAT_NUMBER_RE = re.compile(r"^[0-9]+[A-Z]$")

BookingStatus = Literal["pending", "confirmed", "cancelled"]


def normalize_seat_number(v: str) -> str:
    seat = v.strip().upper()
    if not SEAT_NUMBER_RE.match(seat):
        raise ValueError("seatNumber must be digits followed by a letter (e.g. 12A)")
    return seat


class BookingCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    flightId: int = Field(le=MAX_DB_INT)
    passengerId: int = Field(le=MAX_DB_INT)
    seatNumber: str
    totalPrice: int = Field(gt=0, le=MAX_DB_INT)
    status: Optional[BookingStatus] = None

    @model_validator(mode="before")
    @classmethod
    def _blank_is_missing(cls, data):
        return drop_blank(data, ("flightId", "passengerId", "seatNumber", "totalPrice", "status"))

    @field_validator("seatNumber")
    @classmethod
    def _seat(cls, v: str) -> str:
        return normalize_seat_number(v)


class BookingUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: Optional[BookingStatus] = None
    seatNumber: Optional[str] = None

    @field_validator("seatNumber")
    @classmethod
    def _seat(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return normalize_seat_number(v)


class BookingOut(CamelOut):
    id: int
    flight_id: int
    passenger_id: int
    booking_reference: str
    seat_number: str
    booking_date: datetime
    status: str
    total_price: int
    created_at: datetime
    updated_at: datetime


class BookingDeletedOut(BaseModel):
    message: str
    bookingId: int
