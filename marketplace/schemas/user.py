"""
Pydantic schemas for user responses and profile updates.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from marketplace.models.user import UserRole
from marketplace.schemas.common import PageMeta


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str = Field(..., description="User's unique identifier")
    name: str = Field(..., description="User's display name", examples=["Abebe Kebede"])
    email: EmailStr = Field(..., description="User's email address")
    role: UserRole = Field(..., description="User's role")
    avatar: Optional[str] = Field(None, description="Avatar image URL")
    is_active: bool = Field(..., description="Whether the user account is active")
    created_at: datetime = Field(..., description="Account creation timestamp")


class UserData(BaseModel):
    user: UserResponse


class UserDataResponse(BaseModel):
    """Envelope carrying a single user."""

    success: bool = True
    data: UserData
    message: Optional[str] = None


class UserListResponse(PageMeta):
    """Paginated user list for administrators."""

    success: bool = True
    data: List[UserResponse]


class ProfileUpdateRequest(BaseModel):
    """Schema for updating the caller's own profile."""

    name: Optional[str] = Field(
        None,
        min_length=2,
        max_length=50,
        description="New display name"
    )

    avatar: Optional[str] = Field(
        None,
        max_length=500,
        description="New avatar image URL"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if v is not None:
            if not v.strip():
                raise ValueError("Name cannot be empty")
            return v.strip()
        return v
