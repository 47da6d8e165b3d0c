"""
Authentication request and response schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from api.schemas.common import CamelModel


def _strip_phone(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Phone number is required")
    return value


class ReaderLoginRequest(CamelModel):
    """Reader login with phone number and password."""

    phone: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return _strip_phone(v)


class ReaderSignupRequest(CamelModel):
    name: str = Field(default="", max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=6, max_length=100)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return _strip_phone(v)


class StaffLoginRequest(CamelModel):
    """Writer or admin login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class StaffSignupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Staff passwords need a letter and a digit."""
        if not any(c.isalpha() for c in v):
            raise ValueError("Password must contain at least one letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one digit")
        return v


class UserResponse(CamelModel):
    """User response schema."""

    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    role: str
    is_active: bool
    subscription_status: Optional[str] = None
    subscription_start: Optional[datetime] = None
    subscription_end: Optional[datetime] = None
    created_at: datetime


class SessionResponse(CamelModel):
    """Returned by every login/signup; the token is also set as an HttpOnly cookie."""

    user: UserResponse
    token: str
    expires_in: int  # Seconds until the session token expires


class AuthCheckResponse(CamelModel):
    is_authenticated: bool
    role: Optional[str] = None
    user_id: Optional[str] = None
