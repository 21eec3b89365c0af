"""
Favorite API endpoints. Every route requires an authenticated caller.
"""

from fastapi import APIRouter, Depends, status, Path
from uuid import UUID

from marketplace.services.favorite import FavoriteService
from marketplace.schemas.favorite import (
    FavoriteResponse,
    FavoriteEnvelope,
    FavoriteListResponse,
    FavoriteCheck,
    FavoriteCheckResponse
)
from marketplace.schemas.common import MessageResponse
from marketplace.schemas.error import get_error_responses, get_auth_error_responses
from marketplace.utils.dependencies import get_current_caller, get_favorite_service
from marketplace.utils.permissions import Caller


router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get(
    "",
    response_model=FavoriteListResponse,
    summary="List favorites",
    description="The caller's favorited listings that are still published, newest first",
    responses=get_auth_error_responses()
)
async def list_favorites(
    caller: Caller = Depends(get_current_caller),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteListResponse:
    items = await favorite_service.list_favorites(caller)
    return FavoriteListResponse(count=len(items), data=items)


@router.get(
    "/check/{property_id}",
    response_model=FavoriteCheckResponse,
    summary="Check favorite",
    responses=get_error_responses(401)
)
async def check_favorite(
    property_id: UUID = Path(..., description="Property UUID"),
    caller: Caller = Depends(get_current_caller),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteCheckResponse:
    is_favorite = await favorite_service.is_favorite(caller, property_id)
    return FavoriteCheckResponse(data=FavoriteCheck(is_favorite=is_favorite))


@router.post(
    "/{property_id}",
    response_model=FavoriteEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Add favorite",
    description="Only published listings can be favorited",
    responses=get_error_responses(401, 403, 404, 409)
)
async def add_favorite(
    property_id: UUID = Path(..., description="Property UUID"),
    caller: Caller = Depends(get_current_caller),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteEnvelope:
    favorite = await favorite_service.add_favorite(caller, property_id)
    return FavoriteEnvelope(
        data=FavoriteResponse.model_validate(favorite.to_dict()),
        message="Added to favorites"
    )


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Remove favorite",
    responses=get_error_responses(401, 403, 404)
)
async def remove_favorite(
    property_id: UUID = Path(..., description="Property UUID"),
    caller: Caller = Depends(get_current_caller),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> MessageResponse:
    await favorite_service.remove_favorite(caller, property_id)
    return MessageResponse(message="Removed from favorites")
