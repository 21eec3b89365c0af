"""
Pydantic schemas for authentication requests and responses.
Handles registration, login and token payload validation.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from marketplace.models.user import UserRole
from marketplace.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """Registration request schema."""

    name: str = Field(
        ...,
        min_length=2,
        max_length=50,
        description="User's display name",
        examples=["Abebe Kebede"]
    )
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="User's password (minimum 6 characters)"
    )
    role: UserRole = Field(
        UserRole.USER,
        description="Account role (default: user)"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class AuthData(BaseModel):
    """Authenticated user together with a bearer token."""

    user: UserResponse
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class AuthResponse(BaseModel):
    """Response for register and login; both return the same shape."""

    success: bool = True
    data: AuthData
    message: Optional[str] = None
