"""
Favorite repository for user bookmarks on published listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, desc
from sqlalchemy.orm import selectinload
from marketplace.repositories.base import BaseRepository
from marketplace.models.favorite import Favorite
from marketplace.models.property import Property, PropertyStatus
from typing import Optional, List, Set, Iterable
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[Favorite]):
    """
    Repository for (user, property) favorite pairs.
    Uniqueness of a pair is enforced by the ``uq_favorites_user_property`` constraint.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def get_pair(self, user_id: uuid.UUID, property_id: uuid.UUID) -> Optional[Favorite]:
        """Get the favorite row for a user and property, if any."""
        try:
            result = await self.db.execute(
                select(Favorite).where(
                    and_(Favorite.user_id == user_id, Favorite.property_id == property_id)
                )
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get favorite for user {user_id} and property {property_id}: {e}")
            raise

    async def add_favorite(self, user_id: uuid.UUID, property_id: uuid.UUID) -> Favorite:
        """
        Insert a favorite pair.

        Raises:
            IntegrityError: If the pair already exists
        """
        favorite = await self.create({"user_id": user_id, "property_id": property_id})
        logger.info(f"User {user_id} favorited property {property_id}")
        return favorite

    async def favorite_ids_for(
        self,
        user_id: uuid.UUID,
        property_ids: Iterable[uuid.UUID]
    ) -> Set[uuid.UUID]:
        """
        Return the subset of ``property_ids`` the user has favorited, in one query.
        """
        ids = list(property_ids)
        if not ids:
            return set()

        try:
            result = await self.db.execute(
                select(Favorite.property_id).where(
                    and_(Favorite.user_id == user_id, Favorite.property_id.in_(ids))
                )
            )
            return set(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to look up favorites for user {user_id}: {e}")
            raise

    async def list_published_for_user(self, user_id: uuid.UUID) -> List[Favorite]:
        """
        Favorites of a user whose listing is currently published, newest first.
        Rows pointing at draft or archived listings stay in the table but are skipped.
        """
        try:
            query = (
                select(Favorite)
                .join(Property, Favorite.property_id == Property.id)
                .options(
                    selectinload(Favorite.property_rel).selectinload(Property.owner),
                    selectinload(Favorite.property_rel).selectinload(Property.images)
                )
                .where(
                    and_(
                        Favorite.user_id == user_id,
                        Property.status == PropertyStatus.PUBLISHED
                    )
                )
                .order_by(desc(Favorite.created_at))
            )

            result = await self.db.execute(query)
            favorites = result.scalars().all()

            logger.debug(f"Retrieved {len(favorites)} published favorites for user {user_id}")
            return list(favorites)
        except Exception as e:
            logger.error(f"Failed to list favorites for user {user_id}: {e}")
            raise
