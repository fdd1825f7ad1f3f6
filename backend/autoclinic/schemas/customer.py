from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CustomerBase(BaseModel):
    name: str = ""
    vehicle_details: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    discount: Optional[float] = None
    specials: Optional[str] = None
    customer_code: Optional[str] = None


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    vehicle_details: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    discount: Optional[float] = None
    specials: Optional[str] = None
    customer_code: Optional[str] = None


class CustomerResponse(BaseModel):
    id: int
    name: str
    vehicle_details: str
    email: Optional[str] = ""
    phone: Optional[str] = ""
    discount: Optional[float] = 0
    specials: Optional[str] = ""
    customer_code: Optional[str] = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
