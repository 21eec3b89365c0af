"""
Favorite service for bookmarking published listings.
"""

from typing import List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from marketplace.models.favorite import Favorite
from marketplace.repositories.favorite import FavoriteRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.utils.exceptions import (
    NotFoundError,
    ForbiddenError,
    FavoriteNotFoundError,
    AlreadyFavoritedError
)
from marketplace.utils.permissions import Action, Caller
import uuid
import logging

logger = logging.getLogger(__name__)


class FavoriteService:
    """Per-user favorites. Only published listings can be favorited or listed."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.favorite_repo = FavoriteRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    def _ensure_allowed(self, caller: Caller) -> None:
        if not caller.can(Action.MANAGE_FAVORITES):
            raise ForbiddenError("Not authorized to manage favorites")

    async def add_favorite(self, caller: Caller, property_id: uuid.UUID) -> Favorite:
        """
        Favorite a published listing.

        Raises:
            NotFoundError: If the listing doesn't exist or isn't published
            AlreadyFavoritedError: If the caller already favorited it
        """
        self._ensure_allowed(caller)

        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj or not property_obj.is_published:
            raise NotFoundError("Property", detail="Property not found or not published")

        if await self.favorite_repo.get_pair(caller.user_id, property_id):
            raise AlreadyFavoritedError()

        try:
            return await self.favorite_repo.add_favorite(caller.user_id, property_id)
        except IntegrityError:
            # A concurrent request inserted the same pair first
            raise AlreadyFavoritedError()

    async def remove_favorite(self, caller: Caller, property_id: uuid.UUID) -> None:
        """
        Remove a favorite regardless of the listing's current status.

        Raises:
            FavoriteNotFoundError: If the pair doesn't exist
        """
        self._ensure_allowed(caller)

        favorite = await self.favorite_repo.get_pair(caller.user_id, property_id)
        if not favorite:
            raise FavoriteNotFoundError()

        await self.favorite_repo.delete(favorite.id)
        logger.info(f"User {caller.user_id} removed property {property_id} from favorites")

    async def list_favorites(self, caller: Caller) -> List[Dict[str, Any]]:
        """
        The caller's favorited listings that are still published, newest favorite first.
        Each item is the serialized listing plus ``favorited_at``.
        """
        self._ensure_allowed(caller)

        favorites = await self.favorite_repo.list_published_for_user(caller.user_id)
        items = []
        for favorite in favorites:
            data = favorite.property_rel.to_dict()
            data["is_favorite"] = True
            data["favorited_at"] = favorite.created_at.isoformat()
            items.append(data)
        return items

    async def is_favorite(self, caller: Caller, property_id: uuid.UUID) -> bool:
        """Whether the caller has favorited the listing; never raises for unknown ids."""
        favorite = await self.favorite_repo.get_pair(caller.user_id, property_id)
        return favorite is not None
