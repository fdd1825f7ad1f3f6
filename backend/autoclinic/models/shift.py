from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Float

from autoclinic.core.database import Base


class Shift(Base):
    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, index=True)
    worker = Column(String(120), nullable=False, index=True)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    # times are "HH:MM:SS AM/PM" strings as sent by the app
    clock_in = Column(String(20), nullable=False)
    clock_out = Column(String(20), default="")
    lunch_start = Column(String(20), default="")
    lunch_end = Column(String(20), default="")

    hours = Column(String(30), default="")  # e.g. "7h 12m 5s"
    hours_decimal = Column(Float, default=0)

    status = Column(String(20), default="Active")  # Active, Completed
    deleted_at = Column(DateTime, nullable=True)
    deleted_by = Column(String(120), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
