from typing import Optional
from pydantic import BaseModel


class ProfileResponse(BaseModel):
    id: int
    name: str = ""
    email: str = ""
    phone: str = ""
    avatar: str = ""
    role: Optional[str] = None
    notifications_enabled: bool = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    notifications_enabled: Optional[bool] = None
