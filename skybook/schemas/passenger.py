import re
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from skybook.schemas.common import CamelOut, drop_blank

DOB_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
PASSPORT_RE = re.compile(r"^[A-Z0-9]+$")

class PassengerCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    firstName: str
    lastName: str
    email: str  # plain str to allow .local and other dev domains
    phone: str
    passportNumber: str
    dateOfBirth: date

    @model_validator(mode="before")
    @classmethod
    def _blank_is_missing(cls, data):
        return drop_blank(data, ("firstName", "lastName", "email", "phone", "passportNumber", "dateOfBirth"))

    @field_validator("firstName", "lastName")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v or "." not in v:
            raise ValueError("invalid email format")
        return v

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        return v.strip()

    @field_validator("passportNumber")
    @classmethod
    def _passport(cls, v: str) -> str:
        v = v.strip().upper()
        if not PASSPORT_RE.match(v):
            raise ValueError("passport number must be alphanumeric")
        return v

    @field_validator("dateOfBirth", mode="before")
    @classmethod
    def _dob(cls, v):
        if not isinstance(v, str) or not DOB_RE.match(v.strip()):
            raise ValueError("expected YYYY-MM-DD")
        try:
            return date.fromisoformat(v.strip())
        except ValueError:
            raise ValueError("expected YYYY-MM-DD")

class PassengerOut(CamelOut):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    passport_number: str
    date_of_birth: date
    created_at: datetime
    updated_at: datetime
