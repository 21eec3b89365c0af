"""
Tests for database models.
Covers email normalization, location shaping, publish completeness and serialization.
"""

import pytest
from decimal import Decimal

from marketplace.models.user import User, UserRole
from marketplace.models.property import Property, PropertyStatus, PUBLISH_REQUIRED_FIELDS
from marketplace.models.image import PropertyImage


def complete_property(**overrides) -> Property:
    """Transient listing with every publish requirement present."""
    fields = {
        "title": "Modern 3-Bedroom Apartment",
        "description": "Bright apartment with a balcony, close to shops and transport.",
        "address": "Bole Road 12",
        "city": "Addis Ababa",
        "country": "Ethiopia",
        "price": Decimal("2500000"),
        "status": PropertyStatus.DRAFT,
    }
    fields.update(overrides)
    property_obj = Property(**fields)
    property_obj.images = [PropertyImage(url="https://images.example.com/1.jpg", display_order=0)]
    return property_obj


class TestUserModel:
    """Test User model validation and methods."""

    def test_email_validation_valid(self):
        """Valid emails are normalized to lowercase."""
        valid_emails = [
            "test@example.com",
            "User.Name@Example.com",
            "user+tag@example.org",
        ]

        for email in valid_emails:
            assert User.validate_email_format(email) == email.lower()

    def test_email_validation_invalid(self):
        invalid_emails = ["invalid-email", "@example.com", "test@", "test..test@example.com"]

        for email in invalid_emails:
            with pytest.raises(ValueError, match="Invalid email format"):
                User.validate_email_format(email)

    @pytest.mark.asyncio
    async def test_to_dict_excludes_password(self, test_owner: User):
        data = test_owner.to_dict()

        assert data["email"] == "owner@example.com"
        assert data["role"] == UserRole.OWNER.value
        assert data["is_active"] is True
        assert "hashed_password" not in data
        assert "password" not in data

    @pytest.mark.asyncio
    async def test_summary_is_public_card(self, test_owner: User):
        assert test_owner.to_summary() == {
            "id": str(test_owner.id),
            "name": "Test Owner",
            "email": "owner@example.com",
        }


class TestPropertyModel:
    """Test Property business logic methods."""

    def test_publish_requirements_order(self):
        assert PUBLISH_REQUIRED_FIELDS == ("title", "description", "location", "price", "images")

    def test_complete_listing_has_nothing_missing(self):
        assert complete_property().missing_publish_field() is None

    def test_zero_price_is_publishable(self):
        assert complete_property(price=Decimal("0")).missing_publish_field() is None

    @pytest.mark.parametrize("overrides, expected", [
        ({"title": "   "}, "title"),
        ({"description": ""}, "description"),
        ({"address": None}, "location"),
        ({"city": "  "}, "location"),
        ({"price": None}, "price"),
    ])
    def test_missing_field_is_reported(self, overrides, expected):
        assert complete_property(**overrides).missing_publish_field() == expected

    def test_missing_images_is_reported(self):
        property_obj = complete_property()
        property_obj.images = []

        assert property_obj.missing_publish_field() == "images"

    def test_first_missing_field_wins(self):
        property_obj = complete_property(description="", price=None)
        property_obj.images = []

        assert property_obj.missing_publish_field() == "description"

    def test_location_with_coordinates(self):
        property_obj = complete_property(state="Addis Ababa", latitude=9.0, longitude=38.75)

        assert property_obj.location == {
            "address": "Bole Road 12",
            "city": "Addis Ababa",
            "state": "Addis Ababa",
            "country": "Ethiopia",
            "coordinates": {"lat": 9.0, "lng": 38.75},
        }

    def test_location_without_both_coordinates(self):
        property_obj = complete_property(latitude=9.0)

        assert property_obj.location["coordinates"] is None

    @pytest.mark.asyncio
    async def test_draft_serialization(self, draft_property: Property, test_owner: User):
        data = draft_property.to_dict()

        assert data["status"] == "draft"
        assert data["version"] == 1
        assert data["published_at"] is None
        assert data["archived_reason"] is None
        assert data["price"] == 2500000.0
        assert data["location"]["city"] == "Addis Ababa"
        assert data["images"] == [{
            "url": "https://images.example.com/listings/1.jpg",
            "caption": "Living room",
            "public_id": None,
        }]
        assert data["owner"] == test_owner.to_summary()

    @pytest.mark.asyncio
    async def test_serialization_without_owner(self, draft_property: Property):
        assert "owner" not in draft_property.to_dict(include_owner=False)
