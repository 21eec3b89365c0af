"""
Property service for the listing lifecycle.
Handles create, edit, publish, soft delete and moderation transitions with
ownership checks and optimistic concurrency.
"""

from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from pydantic import ValidationError as PydanticValidationError
from marketplace.database import utcnow
from marketplace.models.property import Property, PropertyStatus, ArchiveReason
from marketplace.repositories.property import PropertyRepository, build_images
from marketplace.repositories.favorite import FavoriteRepository
from marketplace.schemas.property import PropertyCreate, PropertyUpdate
from marketplace.services.error_handler import ErrorHandlerService
from marketplace.services.query import present_properties
from marketplace.utils.exceptions import (
    ForbiddenError,
    ValidationError,
    PropertyNotFoundError,
    PropertyOwnershipError,
    InvalidTransitionError,
    IncompletePublishDataError,
    InvalidArgumentError,
    StaleVersionError
)
from marketplace.utils.permissions import Action, Caller
import uuid
import logging

logger = logging.getLogger(__name__)


def property_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten a validated listing payload into Property column values.
    Images are child rows and are handled separately.
    """
    columns = {
        key: data[key]
        for key in ("title", "description", "price", "category", "bedrooms", "bathrooms", "area", "amenities")
        if key in data
    }

    location = data.get("location")
    if location is not None:
        coordinates = location.get("coordinates") or {}
        columns.update({
            "address": location.get("address"),
            "city": location.get("city"),
            "state": location.get("state"),
            "country": location.get("country"),
            "latitude": coordinates.get("lat"),
            "longitude": coordinates.get("lng"),
        })

    return columns


class PropertyService:
    """
    Listing lifecycle: draft -> published -> archived, with admin enable back to published.
    All operations take the caller explicitly; ownership is checked here, not in routers.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)

    async def create_property(self, caller: Caller, property_data: PropertyCreate) -> Property:
        """
        Create a new listing in draft status owned by the caller.

        Raises:
            ForbiddenError: If the caller is not an owner
        """
        if not caller.can(Action.CREATE_PROPERTY):
            raise ForbiddenError("Only property owners can create listings")

        data = property_data.model_dump()
        create_data = property_columns(data)
        create_data.update({
            "owner_id": caller.user_id,
            "status": PropertyStatus.DRAFT,
            "is_active": True,
        })

        property_obj = await self.property_repo.create_property(create_data, data.get("images"))

        logger.info(f"Property created by owner {caller.user_id}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def get_property(self, property_id: uuid.UUID, caller: Optional[Caller] = None) -> Dict[str, Any]:
        """
        Get a single listing as seen by the caller.
        Drafts and archived listings are visible to their owner and to admins only.

        Returns:
            Serialized listing, with ``is_favorite`` for authenticated callers

        Raises:
            PropertyNotFoundError: If the listing doesn't exist
            ForbiddenError: If the caller may not see a non-published listing
        """
        property_obj = await self._get_or_404(property_id)

        if not property_obj.is_published and not self._can_view_unpublished(property_obj, caller):
            raise ForbiddenError("Not authorized to access this property")

        items = await present_properties(self.favorite_repo, [property_obj], caller)
        return items[0]

    async def update_property(
        self,
        property_id: uuid.UUID,
        caller: Caller,
        property_data: PropertyUpdate
    ) -> Property:
        """
        Edit a draft or archived listing.
        Changes are merged into the stored listing and the result must satisfy the create rules.

        Raises:
            PropertyNotFoundError: If the listing doesn't exist
            PropertyOwnershipError: If the caller doesn't own it
            InvalidTransitionError: If the listing is published
            StaleVersionError: If ``expected_version`` is stale
            ValidationError: If the merged listing is invalid
        """
        property_obj = await self._get_or_404(property_id)

        if not self._can_edit(property_obj, caller):
            raise PropertyOwnershipError("update")

        if property_obj.is_published:
            raise InvalidTransitionError("Cannot edit published properties")

        changes = property_data.model_dump(exclude_unset=True)
        self._check_version(property_obj, changes.pop("expected_version", None))

        merged = self._editable_fields(property_obj)
        # Explicit nulls clear optional fields; PropertyCreate rejects them on required ones
        merged.update(changes)

        try:
            validated = PropertyCreate.model_validate(merged).model_dump()
        except PydanticValidationError as e:
            raise ValidationError(
                "Property validation failed",
                field_errors=ErrorHandlerService.format_validation_errors(e.errors())
            )

        for field, value in property_columns(validated).items():
            setattr(property_obj, field, value)

        if "images" in changes:
            property_obj.images = build_images(validated["images"])

        # Touch the row so image-only edits still bump the version
        property_obj.updated_at = utcnow()

        updated = await self._save(property_obj)
        logger.info(f"Property {property_id} updated by {caller.user_id}: {sorted(changes)}")
        return updated

    async def publish_property(
        self,
        property_id: uuid.UUID,
        caller: Caller,
        expected_version: Optional[int] = None
    ) -> Property:
        """
        Move a complete draft, or a listing its owner archived, to published.
        ``published_at`` is stamped only on the first publish.

        Raises:
            PropertyNotFoundError: If the listing doesn't exist
            PropertyOwnershipError: If the caller doesn't own it
            InvalidTransitionError: If the listing is already published or was disabled by an admin
            IncompletePublishDataError: Naming the first missing required field
        """
        property_obj = await self._get_or_404(property_id)

        if not (caller.owns(property_obj.owner_id) and caller.can(Action.PUBLISH_OWN_PROPERTY)):
            raise PropertyOwnershipError("publish")

        if property_obj.is_published:
            raise InvalidTransitionError("Property is already published")

        if property_obj.archived_reason == ArchiveReason.ADMIN_DISABLED:
            raise InvalidTransitionError("Property was disabled by an administrator and cannot be republished")

        self._check_version(property_obj, expected_version)

        missing = property_obj.missing_publish_field()
        if missing:
            raise IncompletePublishDataError(missing)

        property_obj.status = PropertyStatus.PUBLISHED
        property_obj.is_active = True
        property_obj.archived_reason = None
        if property_obj.published_at is None:
            property_obj.published_at = utcnow()

        published = await self._save(property_obj)
        logger.info(f"Property {property_id} published by {caller.user_id}")
        return published

    async def delete_property(self, property_id: uuid.UUID, caller: Caller) -> Property:
        """
        Soft delete: archive the listing and mark it inactive.
        Deleting an already archived listing changes nothing. An admin deleting
        someone else's listing is recorded as an admin action.

        Raises:
            PropertyNotFoundError: If the listing doesn't exist
            PropertyOwnershipError: If the caller is neither its owner nor an admin
        """
        property_obj = await self._get_or_404(property_id)

        if not self._can_delete(property_obj, caller):
            raise PropertyOwnershipError("delete")

        if property_obj.status == PropertyStatus.ARCHIVED:
            logger.debug(f"Property {property_id} already archived")
            return property_obj

        property_obj.status = PropertyStatus.ARCHIVED
        property_obj.is_active = False
        property_obj.archived_reason = (
            ArchiveReason.OWNER_DELETED if caller.owns(property_obj.owner_id) else ArchiveReason.ADMIN_DISABLED
        )

        archived = await self._save(property_obj)
        logger.info(f"Property {property_id} archived by {caller.user_id}")
        return archived

    async def toggle_property(self, property_id: uuid.UUID, caller: Caller, action: str) -> Property:
        """
        Admin moderation.
        ``disable`` archives the listing; ``enable`` republishes it without
        re-checking the publish requirements.

        Raises:
            ForbiddenError: If the caller is not an admin
            PropertyNotFoundError: If the listing doesn't exist
            InvalidArgumentError: If the action is unknown
        """
        if not caller.can(Action.MODERATE_PROPERTY):
            raise ForbiddenError("Only administrators can moderate properties")

        property_obj = await self._get_or_404(property_id)

        if action == "disable":
            property_obj.status = PropertyStatus.ARCHIVED
            property_obj.is_active = False
            property_obj.archived_reason = ArchiveReason.ADMIN_DISABLED
        elif action == "enable":
            property_obj.status = PropertyStatus.PUBLISHED
            property_obj.is_active = True
            property_obj.archived_reason = None
            if property_obj.published_at is None:
                property_obj.published_at = utcnow()
        else:
            raise InvalidArgumentError('Invalid action. Use "disable" or "enable"')

        toggled = await self._save(property_obj)
        logger.info(f"Property {property_id} {action}d by admin {caller.user_id}")
        return toggled

    async def list_own_properties(
        self,
        caller: Caller,
        status: Optional[PropertyStatus] = None
    ) -> List[Property]:
        """
        All of the caller's listings in any status, newest first.

        Raises:
            ForbiddenError: If the caller is not an owner
        """
        if not caller.can(Action.VIEW_OWN_LISTINGS):
            raise ForbiddenError("Only property owners can view their listings")

        return await self.property_repo.get_properties_by_owner(caller.user_id, status)

    async def _get_or_404(self, property_id: uuid.UUID) -> Property:
        property_obj = await self.property_repo.get_property_with_details(property_id)
        if not property_obj:
            raise PropertyNotFoundError(str(property_id))
        return property_obj

    async def _save(self, property_obj: Property) -> Property:
        property_id = property_obj.id
        try:
            return await self.property_repo.save_property(property_obj)
        except StaleDataError:
            logger.warning(f"Concurrent write detected on property {property_id}")
            raise StaleVersionError()

    def _check_version(self, property_obj: Property, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != property_obj.version:
            raise StaleVersionError(
                f"Property is at version {property_obj.version}, expected {expected_version}"
            )

    def _editable_fields(self, property_obj: Property) -> Dict[str, Any]:
        """Stored listing in the shape accepted by PropertyCreate."""
        return {
            "title": property_obj.title,
            "description": property_obj.description,
            # Unset parts fall back to the schema defaults
            "location": {key: value for key, value in property_obj.location.items() if value is not None},
            "price": property_obj.price,
            "images": [image.to_dict() for image in property_obj.images],
            "category": property_obj.category,
            "bedrooms": property_obj.bedrooms,
            "bathrooms": property_obj.bathrooms,
            "area": property_obj.area,
            "amenities": list(property_obj.amenities or []),
        }

    def _can_view_unpublished(self, property_obj: Property, caller: Optional[Caller]) -> bool:
        if caller is None:
            return False
        return caller.owns(property_obj.owner_id) or caller.can(Action.VIEW_UNPUBLISHED_PROPERTY)

    def _can_edit(self, property_obj: Property, caller: Caller) -> bool:
        return caller.owns(property_obj.owner_id) and caller.can(Action.EDIT_OWN_PROPERTY)

    def _can_delete(self, property_obj: Property, caller: Caller) -> bool:
        if caller.can(Action.DELETE_ANY_PROPERTY):
            return True
        return caller.owns(property_obj.owner_id) and caller.can(Action.DELETE_OWN_PROPERTY)
