"""
Property repository for listing storage, filtering and moderation statistics.
Filter criteria are translated into SQL here and nowhere else.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, desc
from sqlalchemy.orm import selectinload
from marketplace.repositories.base import BaseRepository
from marketplace.models.property import Property, PropertyStatus, PropertyCategory
from marketplace.models.image import PropertyImage
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyFilterCriteria:
    """Typed listing filters; ``None`` means the filter is not applied."""

    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    city_contains: Optional[str] = None
    category: Optional[PropertyCategory] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    status: Optional[PropertyStatus] = None
    owner_id: Optional[uuid.UUID] = None


def build_images(images: List[Dict[str, Any]]) -> List[PropertyImage]:
    """Turn image payloads into ordered image rows."""
    return [
        PropertyImage(
            url=image["url"],
            caption=image.get("caption"),
            public_id=image.get("public_id"),
            display_order=position,
        )
        for position, image in enumerate(images)
    ]


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Listings are always returned with owner and images loaded.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    def _with_details(self, query):
        return query.options(
            selectinload(Property.owner),
            selectinload(Property.images)
        )

    async def create_property(
        self,
        property_data: Dict[str, Any],
        images: Optional[List[Dict[str, Any]]] = None
    ) -> Property:
        """
        Create a new listing with its images.

        Args:
            property_data: Column values for the listing
            images: Ordered image payloads (url, caption, public_id)

        Returns:
            Created property with relationships loaded
        """
        try:
            property_obj = Property(**property_data)
            property_obj.images = build_images(images or [])
            self.db.add(property_obj)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

        logger.info(f"Created property: {property_obj.title} (ID: {property_obj.id})")
        return await self.get_property_with_details(property_obj.id)

    async def get_property_with_details(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get property with owner and images freshly loaded.

        Returns:
            Property with loaded relationships or None if not found
        """
        try:
            query = (
                self._with_details(select(Property))
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )

            result = await self.db.execute(query)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def save_property(self, property_obj: Property) -> Property:
        """
        Persist changes to a listing and return it reloaded.

        Raises:
            StaleDataError: If another writer bumped the version first
        """
        await self.save(property_obj)
        return await self.get_property_with_details(property_obj.id)

    async def search_properties(
        self,
        criteria: PropertyFilterCriteria,
        skip: int = 0,
        limit: Optional[int] = 10
    ) -> Tuple[List[Property], int]:
        """
        Filter listings with pagination, newest first.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            query = self._with_details(select(Property))
            count_query = select(func.count(Property.id))

            conditions = self._build_filter_conditions(criteria)
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar() or 0

            query = (
                query.order_by(desc(Property.created_at), desc(Property.id))
                .offset(skip)
                .limit(limit)
            )

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, criteria: PropertyFilterCriteria) -> List:
        """
        Build SQLAlchemy filter conditions from search criteria.
        """
        conditions = []

        if criteria.status is not None:
            conditions.append(Property.status == criteria.status)

        if criteria.owner_id is not None:
            conditions.append(Property.owner_id == criteria.owner_id)

        # Case-insensitive partial match on the city
        if criteria.city_contains:
            conditions.append(Property.city.icontains(criteria.city_contains, autoescape=True))

        if criteria.min_price is not None:
            conditions.append(Property.price >= criteria.min_price)
        if criteria.max_price is not None:
            conditions.append(Property.price <= criteria.max_price)

        if criteria.category is not None:
            conditions.append(Property.category == criteria.category)

        if criteria.bedrooms is not None:
            conditions.append(Property.bedrooms == criteria.bedrooms)
        if criteria.bathrooms is not None:
            conditions.append(Property.bathrooms == criteria.bathrooms)

        return conditions

    async def get_properties_by_owner(
        self,
        owner_id: uuid.UUID,
        status: Optional[PropertyStatus] = None
    ) -> List[Property]:
        """All listings of one owner in any status, newest first."""
        properties, _ = await self.search_properties(
            PropertyFilterCriteria(owner_id=owner_id, status=status),
            skip=0,
            limit=None
        )
        return properties

    async def count_by_status(self) -> Dict[str, int]:
        """Number of listings per status; statuses without listings report 0."""
        try:
            result = await self.db.execute(
                select(Property.status, func.count(Property.id)).group_by(Property.status)
            )
            counts = {status.value: 0 for status in PropertyStatus}
            for status, total in result.all():
                counts[status.value] = total
            return counts
        except Exception as e:
            logger.error(f"Failed to count properties by status: {e}")
            raise

    async def get_recent(self, limit: int = 5) -> List[Property]:
        """Most recently created listings in any status."""
        properties, _ = await self.search_properties(PropertyFilterCriteria(), skip=0, limit=limit)
        return properties
