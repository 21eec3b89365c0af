"""
Business logic services.
"""

from marketplace.services.auth import AuthService
from marketplace.services.property import PropertyService
from marketplace.services.query import PropertyQueryService
from marketplace.services.favorite import FavoriteService
from marketplace.services.admin import AdminService
from marketplace.services.error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "PropertyQueryService",
    "FavoriteService",
    "AdminService",
    "ErrorHandlerService",
]
