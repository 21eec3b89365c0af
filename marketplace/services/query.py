"""
Property query service for the public listing browser.
Decides which statuses a caller may see and enriches pages with favorite flags.
"""

from dataclasses import replace
from typing import Optional, List, Dict, Any, Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.models.property import Property, PropertyStatus
from marketplace.repositories.property import PropertyRepository, PropertyFilterCriteria
from marketplace.repositories.favorite import FavoriteRepository
from marketplace.utils.exceptions import InvalidArgumentError
from marketplace.utils.permissions import Action, Caller
import math
import logging

logger = logging.getLogger(__name__)


async def present_properties(
    favorite_repo: FavoriteRepository,
    properties: Iterable[Property],
    caller: Optional[Caller]
) -> List[Dict[str, Any]]:
    """
    Serialize listings for a caller.
    Authenticated callers get ``is_favorite`` on every item from one batch lookup.
    """
    properties = list(properties)
    favorite_ids = set()
    if caller is not None:
        favorite_ids = await favorite_repo.favorite_ids_for(
            caller.user_id, [property_obj.id for property_obj in properties]
        )

    items = []
    for property_obj in properties:
        data = property_obj.to_dict()
        if caller is not None:
            data["is_favorite"] = property_obj.id in favorite_ids
        items.append(data)
    return items


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


class PropertyQueryService:
    """
    Paginated, filtered listing search with role-dependent visibility.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)

    @staticmethod
    def visible_criteria(
        criteria: PropertyFilterCriteria,
        caller: Optional[Caller]
    ) -> PropertyFilterCriteria:
        """
        Narrow criteria to what the caller may see.

        Published listings are public. An owner asking for another status only
        gets their own listings in that status; every other caller is held to
        published listings whatever status they asked for.
        """
        requested = criteria.status or PropertyStatus.PUBLISHED

        if requested == PropertyStatus.PUBLISHED:
            return replace(criteria, status=PropertyStatus.PUBLISHED)

        if caller is not None and caller.can(Action.VIEW_OWN_LISTINGS):
            return replace(criteria, status=requested, owner_id=caller.user_id)

        return replace(criteria, status=PropertyStatus.PUBLISHED)

    async def search(
        self,
        criteria: PropertyFilterCriteria,
        caller: Optional[Caller] = None,
        page: int = 1,
        limit: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Search listings visible to the caller.

        Args:
            criteria: Requested filters
            caller: Authenticated caller, or None for anonymous requests
            page: 1-based page number
            limit: Page size, 1 to ``max_page_size``

        Returns:
            Dictionary with ``data``, ``count``, ``total``, ``total_pages`` and ``current_page``

        Raises:
            InvalidArgumentError: If page or limit is out of range
        """
        if limit is None:
            limit = settings.default_page_size

        if page < 1:
            raise InvalidArgumentError("page must be at least 1")
        if not 1 <= limit <= settings.max_page_size:
            raise InvalidArgumentError(f"limit must be between 1 and {settings.max_page_size}")

        effective = self.visible_criteria(criteria, caller)
        properties, total = await self.property_repo.search_properties(
            effective,
            skip=(page - 1) * limit,
            limit=limit
        )

        data = await present_properties(self.favorite_repo, properties, caller)

        logger.debug(
            f"Listing search page {page} (limit {limit}) returned {len(data)} of {total} "
            f"with status {effective.status.value}"
        )
        return {
            "data": data,
            "count": len(data),
            "total": total,
            "total_pages": total_pages(total, limit),
            "current_page": page,
        }
