"""
Pydantic schemas for property requests and responses.
Handles listing create/update payloads, nested location and images, and list envelopes.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from marketplace.config import settings
from marketplace.models.property import PropertyCategory, PropertyStatus, ArchiveReason
from marketplace.schemas.common import PageMeta


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class LocationSchema(BaseModel):
    """Listing location; address and city are mandatory."""

    address: str = Field(..., min_length=1, max_length=255, examples=["Bole Road 12"])
    city: str = Field(..., min_length=1, max_length=100, examples=["Addis Ababa"])
    state: Optional[str] = Field(None, max_length=100)
    country: str = Field(default_factory=lambda: settings.default_country, max_length=100)
    coordinates: Optional[Coordinates] = None

    @field_validator("address", "city")
    @classmethod
    def validate_required_text(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class ImageSchema(BaseModel):
    """Image reference produced by the external image store."""

    url: str = Field(..., min_length=1, max_length=500, examples=["https://cdn.example.com/p/1.jpg"])
    caption: Optional[str] = Field(None, max_length=255)
    public_id: Optional[str] = Field(None, max_length=255)


class PropertyBase(BaseModel):
    """Base property schema with the listing fields."""

    title: str = Field(
        ...,
        min_length=5,
        max_length=200,
        description="Listing title",
        examples=["Modern 3-Bedroom Apartment"]
    )

    description: str = Field(
        ...,
        min_length=10,
        max_length=2000,
        description="Detailed listing description"
    )

    location: LocationSchema

    price: Decimal = Field(
        ...,
        ge=0,
        description="Listing price in local currency",
        examples=[2500000]
    )

    images: List[ImageSchema] = Field(default_factory=list, max_length=10)

    category: PropertyCategory = Field(PropertyCategory.APARTMENT)

    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area: Optional[float] = Field(None, ge=0)

    amenities: List[str] = Field(default_factory=list)

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v):
        """Validate and clean free text."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("amenities")
    @classmethod
    def clean_amenities(cls, v):
        """Drop blanks and duplicates while keeping the given order."""
        seen = []
        for label in v:
            label = label.strip()
            if label and label not in seen:
                seen.append(label)
        return seen


class PropertyCreate(PropertyBase):
    """Schema for creating a new listing; listings always start as drafts."""


class PropertyUpdate(BaseModel):
    """
    Schema for updating a draft or archived listing.
    Status, ownership and timestamps cannot be changed here.
    """

    title: Optional[str] = Field(None, min_length=5, max_length=200)
    description: Optional[str] = Field(None, min_length=10, max_length=2000)
    location: Optional[LocationSchema] = None
    price: Optional[Decimal] = Field(None, ge=0)
    images: Optional[List[ImageSchema]] = Field(None, max_length=10)
    category: Optional[PropertyCategory] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area: Optional[float] = Field(None, ge=0)
    amenities: Optional[List[str]] = None

    expected_version: Optional[int] = Field(
        None,
        ge=1,
        description="Reject the update if the listing's version differs"
    )


class OwnerSummary(BaseModel):
    id: str
    name: str
    email: str


class LocationResponse(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class PropertyResponse(BaseModel):
    """Listing as returned to clients."""

    id: str
    title: str
    description: str
    location: LocationResponse
    price: Optional[float]
    images: List[ImageSchema]
    owner_id: str
    owner: Optional[OwnerSummary] = None
    status: PropertyStatus
    archived_reason: Optional[ArchiveReason] = None
    category: PropertyCategory
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area: Optional[float] = None
    amenities: List[str]
    is_active: bool
    published_at: Optional[datetime] = None
    version: int
    created_at: datetime
    updated_at: datetime
    is_favorite: Optional[bool] = Field(
        None,
        description="Present for authenticated callers only"
    )


class PropertyEnvelope(BaseModel):
    success: bool = True
    data: PropertyResponse
    message: Optional[str] = None


class PropertyListResponse(PageMeta):
    """Paginated listing page."""

    success: bool = True
    data: List[PropertyResponse]


class OwnPropertiesResponse(BaseModel):
    """Owner's own listings; not paginated."""

    success: bool = True
    count: int
    data: List[PropertyResponse]
