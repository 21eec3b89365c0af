"""
Pydantic schemas for request/response validation.
"""

from .common import MessageResponse, PageMeta

from .auth import (
    RegisterRequest,
    LoginRequest,
    AuthData,
    AuthResponse
)

from .user import (
    UserResponse,
    UserData,
    UserDataResponse,
    UserListResponse,
    ProfileUpdateRequest
)

from .property import (
    Coordinates,
    LocationSchema,
    ImageSchema,
    PropertyBase,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyEnvelope,
    PropertyListResponse,
    OwnPropertiesResponse
)

from .favorite import (
    FavoriteResponse,
    FavoriteEnvelope,
    FavoritePropertyResponse,
    FavoriteListResponse,
    FavoriteCheckResponse
)

from .admin import (
    TogglePropertyRequest,
    MetricsResponse,
    ToggleResponse
)

__all__ = [
    "MessageResponse",
    "PageMeta",

    # Authentication
    "RegisterRequest",
    "LoginRequest",
    "AuthData",
    "AuthResponse",

    # User
    "UserResponse",
    "UserData",
    "UserDataResponse",
    "UserListResponse",
    "ProfileUpdateRequest",

    # Property
    "Coordinates",
    "LocationSchema",
    "ImageSchema",
    "PropertyBase",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyEnvelope",
    "PropertyListResponse",
    "OwnPropertiesResponse",

    # Favorite
    "FavoriteResponse",
    "FavoriteEnvelope",
    "FavoritePropertyResponse",
    "FavoriteListResponse",
    "FavoriteCheckResponse",

    # Admin
    "TogglePropertyRequest",
    "MetricsResponse",
    "ToggleResponse"
]
