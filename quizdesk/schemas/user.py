"""
Pydantic schemas for User model.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Role = Literal["admin", "student"]


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    display_name: str = Field(..., min_length=1)


class UserCreate(UserBase):
    """Schema for account creation."""

    password: str = Field(..., min_length=6)
    role: Role = "student"


class User(UserBase):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    role: Role
    created_at: Optional[datetime] = None


class Token(BaseModel):
    """Schema for JWT token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    role: Role
