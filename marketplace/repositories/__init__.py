"""
Repository layer for data access operations.
"""

from marketplace.repositories.base import BaseRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository, PropertyFilterCriteria
from marketplace.repositories.favorite import FavoriteRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "PropertyFilterCriteria",
    "FavoriteRepository",
]
