from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ShiftCreate(BaseModel):
    worker: str
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    clock_in: str


class ShiftUpdate(BaseModel):
    clock_out: Optional[str] = None
    status: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None


class ShiftResponse(BaseModel):
    id: int
    worker: str
    date: str
    clock_in: str
    clock_out: str = ""
    lunch_start: str = ""
    lunch_end: str = ""
    hours: str = ""
    hours_decimal: float = 0
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
