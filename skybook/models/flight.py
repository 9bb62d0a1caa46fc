from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from skybook.db.session import Base

class Flight(Base):
    __tablename__ = "flights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flight_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    airline: Mapped[str] = mapped_column(String(120))

    origin: Mapped[str] = mapped_column(String(3), index=True)       # IATA, uppercase
    destination: Mapped[str] = mapped_column(String(3), index=True)  # IATA, uppercase
    departure_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)  # UTC
    arrival_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    price: Mapped[int] = mapped_column(Integer)
    # 0 <= available_seats <= total_seats; only booking_service moves it
    available_seats: Mapped[int] = mapped_column(Integer)
    total_seats: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default="scheduled")  # scheduled, delayed, cancelled, departed

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
