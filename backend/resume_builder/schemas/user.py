"""
User schemas for registration, login and profile management.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from resume_builder.schemas.common import CamelModel


def _check_password(v: str) -> str:
    if not re.search(r"[A-Za-z]", v) or not re.search(r"\d", v):
        raise ValueError("Password must contain at least one letter and one digit")
    return v


class UserCreate(CamelModel):
    """Schema for creating a new user."""

    email: EmailStr = Field(..., description="User's email address")
    name: str = Field(..., min_length=2, max_length=100, description="User's display name")
    password: str = Field(..., min_length=8, max_length=128, description="User's password")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return v.strip()


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    """Schema for updating the caller's profile."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None


class PasswordChange(CamelModel):
    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., min_length=8, max_length=128, description="New password")

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        return _check_password(v)


class UserResponse(CamelModel):
    id: int
    email: EmailStr
    name: str
    is_admin: bool
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
