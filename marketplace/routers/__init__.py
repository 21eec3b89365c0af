"""
API routers for the Property Marketplace API.
"""

from marketplace.routers import auth, properties, favorites, admin

__all__ = ["auth", "properties", "favorites", "admin"]
