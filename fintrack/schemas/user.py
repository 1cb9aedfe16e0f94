from typing import Optional
from pydantic import BaseModel, EmailStr, Field


NAME_PATTERN = r"^[a-zA-Z ]+$"
PASSWORD_PATTERN = r"^[A-Za-z0-9!@#$%^&*]+$"


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=50, pattern=PASSWORD_PATTERN)


class UserCreate(UserLogin):
    name: str = Field(..., min_length=3, max_length=30, pattern=NAME_PATTERN)


class LoginResponse(BaseModel):
    status: bool = True
    message: str
    roomId: str
    accessToken: str
    refreshToken: str


class RefreshResponse(BaseModel):
    status: bool = True
    message: str
    accessToken: str


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    type: Optional[str] = None
