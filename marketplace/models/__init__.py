"""
Database models for the Property Marketplace API.
Includes User, Property, PropertyImage and Favorite models.
"""

from marketplace.models.user import User, UserRole
from marketplace.models.property import (
    Property,
    PropertyStatus,
    PropertyCategory,
    ArchiveReason,
    PUBLISH_REQUIRED_FIELDS,
)
from marketplace.models.image import PropertyImage
from marketplace.models.favorite import Favorite

__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyStatus",
    "PropertyCategory",
    "ArchiveReason",
    "PUBLISH_REQUIRED_FIELDS",
    "PropertyImage",
    "Favorite",
]
