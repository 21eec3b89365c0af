"""
Admin service for platform metrics, user listing and listing moderation.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.models.property import Property, PropertyStatus
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository, PropertyFilterCriteria
from marketplace.services.property import PropertyService
from marketplace.services.query import total_pages
from marketplace.utils.exceptions import InsufficientPermissionsError, InvalidArgumentError
from marketplace.utils.permissions import Action, Caller
import uuid
import logging

logger = logging.getLogger(__name__)

RECENT_PROPERTIES_LIMIT = 5


class AdminService:
    """
    Administrator operations.
    Admins see every listing in every status here; the public listing rules do not apply.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.property_service = PropertyService(db_session)

    def _require(self, caller: Caller, action: Action, description: str) -> None:
        if not caller.can(action):
            raise InsufficientPermissionsError(description)

    def _page_bounds(self, page: int, limit: Optional[int]) -> int:
        limit = limit or settings.default_page_size
        if page < 1:
            raise InvalidArgumentError("page must be at least 1")
        if not 1 <= limit <= settings.max_page_size:
            raise InvalidArgumentError(f"limit must be between 1 and {settings.max_page_size}")
        return limit

    async def get_metrics(self, caller: Caller) -> Dict[str, Any]:
        """Counts by role and by status plus the most recent listings."""
        self._require(caller, Action.VIEW_METRICS, "view metrics")

        users_by_role = await self.user_repo.count_by_role()
        properties_by_status = await self.property_repo.count_by_status()
        recent = await self.property_repo.get_recent(RECENT_PROPERTIES_LIMIT)

        return {
            "users": {
                "total": sum(users_by_role.values()),
                "by_role": users_by_role,
            },
            "properties": {
                "total": sum(properties_by_status.values()),
                "by_status": properties_by_status,
            },
            "recent_properties": [property_obj.to_dict() for property_obj in recent],
        }

    async def list_users(self, caller: Caller, page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        """All accounts, newest first, without password hashes."""
        self._require(caller, Action.VIEW_USERS, "view users")
        limit = self._page_bounds(page, limit)

        users, total = await self.user_repo.list_users(skip=(page - 1) * limit, limit=limit)
        data = [user.to_dict() for user in users]

        return {
            "data": data,
            "count": len(data),
            "total": total,
            "total_pages": total_pages(total, limit),
            "current_page": page,
        }

    async def list_properties(
        self,
        caller: Caller,
        page: int = 1,
        limit: Optional[int] = None,
        status: Optional[PropertyStatus] = None
    ) -> Dict[str, Any]:
        """Every listing in any status, optionally narrowed to one status."""
        self._require(caller, Action.VIEW_UNPUBLISHED_PROPERTY, "view all properties")
        limit = self._page_bounds(page, limit)

        properties, total = await self.property_repo.search_properties(
            PropertyFilterCriteria(status=status),
            skip=(page - 1) * limit,
            limit=limit
        )
        data = [property_obj.to_dict() for property_obj in properties]

        return {
            "data": data,
            "count": len(data),
            "total": total,
            "total_pages": total_pages(total, limit),
            "current_page": page,
        }

    async def toggle_property(self, caller: Caller, property_id: uuid.UUID, action: str) -> Property:
        """Disable or enable a listing; see PropertyService.toggle_property."""
        return await self.property_service.toggle_property(property_id, caller, action)
