from typing import Optional
from pydantic import BaseModel


class SupportReport(BaseModel):
    subject: str = ""
    message: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    to: Optional[str] = None
