"""
FastAPI dependency injection utilities for authentication and database sessions.
Provides reusable dependencies for route protection and caller extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.database import get_db
from marketplace.models.user import User, UserRole
from marketplace.services.auth import AuthService
from marketplace.services.property import PropertyService
from marketplace.services.query import PropertyQueryService
from marketplace.services.favorite import FavoriteService
from marketplace.services.admin import AdminService
from marketplace.utils.exceptions import APIException, UnauthorizedError, ForbiddenError
from marketplace.utils.permissions import Caller
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme; missing tokens are reported by get_current_user
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_query_service(db: AsyncSession = Depends(get_db)) -> PropertyQueryService:
    return PropertyQueryService(db)


async def get_favorite_service(db: AsyncSession = Depends(get_db)) -> FavoriteService:
    return FavoriteService(db)


async def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If no token is provided, it is invalid or expired,
            or its subject no longer exists
        InactiveUserError: If the account is deactivated
    """
    if not credentials:
        raise UnauthorizedError("Not authorized, no token")

    return await auth_service.get_current_user(credentials.credentials)


async def get_current_caller(current_user: User = Depends(get_current_user)) -> Caller:
    """Identity handed to services for authenticated routes."""
    return Caller.from_user(current_user)


async def get_optional_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Caller]:
    """
    Caller for public endpoints that behave differently for signed-in users.
    A missing or unusable token means an anonymous caller rather than an error.
    """
    if not credentials:
        return None

    try:
        user = await auth_service.get_current_user(credentials.credentials)
    except APIException as e:
        logger.debug(f"Ignoring unusable token on public endpoint: {e.detail}")
        return None

    return Caller.from_user(user)


def require_roles(*roles: UserRole):
    """
    Create a dependency that admits only the given roles.

    Returns:
        Dependency resolving to the caller
    """
    allowed = frozenset(roles)

    async def role_dependency(caller: Caller = Depends(get_current_caller)) -> Caller:
        if caller.role not in allowed:
            raise ForbiddenError(f"User role {caller.role.value} is not authorized to access this route")
        return caller

    return role_dependency
