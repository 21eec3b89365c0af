"""
Property model for marketplace listings.
Holds listing details, location, pricing, lifecycle status and ownership.
"""

from sqlalchemy import (
    String, Text, Integer, Numeric, Float, Boolean, DateTime, JSON,
    Enum as SQLEnum, Index, ForeignKey
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
from datetime import datetime
from decimal import Decimal
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from marketplace.models.user import User
    from marketplace.models.image import PropertyImage


class PropertyStatus(str, enum.Enum):
    """Listing lifecycle status."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PropertyCategory(str, enum.Enum):
    """Fixed set of listing categories."""
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    LAND = "land"
    COMMERCIAL = "commercial"


class ArchiveReason(str, enum.Enum):
    """Why an archived listing was archived."""
    OWNER_DELETED = "owner_deleted"
    ADMIN_DISABLED = "admin_disabled"


# Checked in this order when publishing; the first missing one is reported
PUBLISH_REQUIRED_FIELDS = ("title", "description", "location", "price", "images")


class Property(Base):
    """
    Property listing owned by a single owner.
    Every write bumps ``version`` so concurrent writers cannot silently overwrite each other.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed listing description"
    )

    # Location
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        index=True,
        comment="Listing price in local currency"
    )

    category: Mapped[PropertyCategory] = mapped_column(
        SQLEnum(PropertyCategory),
        nullable=False,
        default=PropertyCategory.APARTMENT,
        index=True
    )

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    amenities: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Free-text amenity labels"
    )

    # Lifecycle
    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus),
        nullable=False,
        default=PropertyStatus.DRAFT,
        index=True
    )

    archived_reason: Mapped[Optional[ArchiveReason]] = mapped_column(
        SQLEnum(ArchiveReason),
        nullable=True,
        comment="Set while archived: owner deletion or admin disable"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True
    )

    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Stamped once on the draft to published transition"
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", lazy="selectin")

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.display_order"
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, status={self.status})>"

    @property
    def location(self) -> dict:
        """Location as a nested object."""
        coordinates = None
        if self.latitude is not None and self.longitude is not None:
            coordinates = {"lat": self.latitude, "lng": self.longitude}
        return {
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "coordinates": coordinates,
        }

    @property
    def has_location(self) -> bool:
        return bool(self.address and self.address.strip() and self.city and self.city.strip())

    @property
    def is_published(self) -> bool:
        return self.status == PropertyStatus.PUBLISHED

    def missing_publish_field(self) -> Optional[str]:
        """
        Return the first field that blocks publishing, or None when the listing is complete.
        """
        present = {
            "title": bool(self.title and self.title.strip()),
            "description": bool(self.description and self.description.strip()),
            "location": self.has_location,
            "price": self.price is not None,
            "images": bool(self.images),
        }
        for field in PUBLISH_REQUIRED_FIELDS:
            if not present[field]:
                return field
        return None

    def to_dict(self, include_owner: bool = True) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_owner: Whether to embed the owner's public card

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "price": float(self.price) if self.price is not None else None,
            "images": [image.to_dict() for image in self.images],
            "owner_id": str(self.owner_id),
            "status": self.status.value,
            "archived_reason": self.archived_reason.value if self.archived_reason else None,
            "category": self.category.value,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area": self.area,
            "amenities": list(self.amenities or []),
            "is_active": self.is_active,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "version": self.version,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_owner and self.owner is not None:
            result["owner"] = self.owner.to_summary()

        return result


# Browsing filters on status first, then narrows by price or owner
status_price_index = Index(
    "idx_properties_status_price",
    Property.status,
    Property.price
)

owner_status_index = Index(
    "idx_properties_owner_status",
    Property.owner_id,
    Property.status,
    Property.created_at.desc()
)
