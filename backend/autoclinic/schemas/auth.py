from typing import Optional
from pydantic import BaseModel


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    role: Optional[str] = None


# Fields default to "" so the routes can answer missing input with their own 400s

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    id: int
    name: str
    email: str
    role: Optional[str] = None
    token: str
    type: str


class ForgotPasswordRequest(BaseModel):
    email: str = ""


class ResetPasswordRequest(BaseModel):
    token: str = ""
    password: str = ""


class MessageResponse(BaseModel):
    message: str


class IdentityResponse(BaseModel):
    id: int
    role: str
    name: str
    type: str
