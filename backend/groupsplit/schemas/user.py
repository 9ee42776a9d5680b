"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime
from groupsplit.schemas.common import Money


class UserBase(BaseModel):
    """Base user schema."""
    username: str
    email: EmailStr


class UserCreate(UserBase):
    """Schema for user creation."""
    password: str
    full_name: Optional[str] = None


class UserResponse(UserBase):
    """Schema for user response."""
    id: int
    full_name: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    """Schema for user login."""
    username: str
    password: str


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserBalanceSummary(BaseModel):
    """Caller's position summed over every group they belong to."""
    total_owed: Money
    total_owing: Money
    net_balance: Money
