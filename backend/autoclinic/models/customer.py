from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Float, UniqueConstraint

from autoclinic.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    vehicle_details = Column(String(255), nullable=False)
    email = Column(String(255), default="", index=True)
    phone = Column(String(50), default="")
    discount = Column(Float, default=0)
    specials = Column(String(255), default="")
    customer_code = Column(String(50), default="")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("name", "vehicle_details", name="uq_customer_name_vehicle"),
    )
