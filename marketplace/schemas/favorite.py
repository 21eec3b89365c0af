"""
Pydantic schemas for favorite responses.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from marketplace.schemas.property import PropertyResponse


class FavoriteResponse(BaseModel):
    id: str
    user_id: str
    property_id: str
    created_at: datetime


class FavoriteEnvelope(BaseModel):
    success: bool = True
    data: FavoriteResponse
    message: Optional[str] = None


class FavoritePropertyResponse(PropertyResponse):
    """A favorited listing together with the time it was favorited."""

    favorited_at: datetime


class FavoriteListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[FavoritePropertyResponse]


class FavoriteCheck(BaseModel):
    is_favorite: bool


class FavoriteCheckResponse(BaseModel):
    success: bool = True
    data: FavoriteCheck
