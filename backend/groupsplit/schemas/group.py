"""
Pydantic schemas for Group, membership and invite entities.
"""
from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional
from datetime import datetime


class GroupCreate(BaseModel):
    """Schema for group creation."""
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class GroupResponse(BaseModel):
    """Schema for group response."""
    id: int
    name: str
    description: Optional[str] = None
    created_by: int
    created_at: datetime

    class Config:
        from_attributes = True


class MemberIdentifier(BaseModel):
    """Identifies a user by id, email or username (first one given wins)."""
    user_id: Optional[int] = None
    email: Optional[EmailStr] = None
    username: Optional[str] = None

    @model_validator(mode="after")
    def require_identifier(self):
        if self.user_id is None and not self.email and not self.username:
            raise ValueError("No identifier provided")
        return self


class MemberResponse(BaseModel):
    """Schema for a group member."""
    user_id: int
    username: str
    email: str
    role: str
    joined_at: datetime


class InviteResponse(BaseModel):
    """Schema for an invite link."""
    id: int
    group_id: int
    invite_code: str
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = None
    current_uses: int

    class Config:
        from_attributes = True
