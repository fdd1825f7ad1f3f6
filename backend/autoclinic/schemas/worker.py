from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class WorkerCreate(BaseModel):
    name: str = ""
    email: str
    phone: str = ""
    role: Optional[str] = None
    hourly_rate: float = 0


class WorkerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[str] = None
    hourly_rate: Optional[float] = None
    clocked_in: Optional[bool] = None
    password: Optional[str] = None


class WorkerResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = ""
    avatar: Optional[str] = ""
    role: str
    hourly_rate: float = 0
    clocked_in: bool = False
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkerPasswordReset(BaseModel):
    notify: bool = False


class WorkerPasswordResetResponse(BaseModel):
    temporary_password: str
    emailed: bool
