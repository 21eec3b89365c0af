"""
Property API endpoints for browsing listings and managing the listing lifecycle.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional
from decimal import Decimal
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import UserRole
from marketplace.models.property import PropertyStatus, PropertyCategory
from marketplace.repositories.property import PropertyFilterCriteria
from marketplace.services.property import PropertyService
from marketplace.services.query import PropertyQueryService
from marketplace.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyEnvelope,
    PropertyListResponse,
    OwnPropertiesResponse
)
from marketplace.schemas.common import MessageResponse
from marketplace.schemas.error import get_error_responses, get_auth_error_responses, get_crud_error_responses
from marketplace.utils.dependencies import (
    get_optional_caller,
    get_property_service,
    get_query_service,
    require_roles
)
from marketplace.utils.permissions import Caller


router = APIRouter(prefix="/properties", tags=["Properties"])

owner_only = require_roles(UserRole.OWNER)
owner_or_admin = require_roles(UserRole.OWNER, UserRole.ADMIN)


@router.get(
    "",
    response_model=PropertyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List properties with filtering",
    description=(
        "Paginated listing search, newest first. Anonymous callers and users only see "
        "published listings; owners may ask for their own drafts or archived listings."
    ),
    responses=get_error_responses(400)
)
async def list_properties(
    location: Optional[str] = Query(None, max_length=100, description="Case-insensitive match on the city"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price filter"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price filter"),
    category: Optional[PropertyCategory] = Query(None, description="Listing category"),
    bedrooms: Optional[int] = Query(None, ge=0, description="Exact number of bedrooms"),
    bathrooms: Optional[int] = Query(None, ge=0, description="Exact number of bathrooms"),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="Listing status"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Number of listings per page"
    ),
    caller: Optional[Caller] = Depends(get_optional_caller),
    query_service: PropertyQueryService = Depends(get_query_service)
) -> PropertyListResponse:
    criteria = PropertyFilterCriteria(
        min_price=min_price,
        max_price=max_price,
        city_contains=location.strip() if location else None,
        category=category,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        status=status_filter
    )

    result = await query_service.search(criteria, caller=caller, page=page, limit=limit)
    return PropertyListResponse(**result)


@router.get(
    "/my-properties/all",
    response_model=OwnPropertiesResponse,
    summary="List the caller's own listings",
    description="Every listing owned by the caller in any status, newest first",
    responses=get_auth_error_responses()
)
async def list_my_properties(
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="Listing status"),
    caller: Caller = Depends(owner_only),
    property_service: PropertyService = Depends(get_property_service)
) -> OwnPropertiesResponse:
    properties = await property_service.list_own_properties(caller, status_filter)
    return OwnPropertiesResponse(
        count=len(properties),
        data=[PropertyResponse.model_validate(property_obj.to_dict()) for property_obj in properties]
    )


@router.get(
    "/{property_id}",
    response_model=PropertyEnvelope,
    summary="Get property by ID",
    description="Drafts and archived listings are only visible to their owner and admins",
    responses=get_error_responses(403, 404)
)
async def get_property(
    property_id: UUID = Path(..., description="Property UUID"),
    caller: Optional[Caller] = Depends(get_optional_caller),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    data = await property_service.get_property(property_id, caller)
    return PropertyEnvelope(data=PropertyResponse.model_validate(data))


@router.post(
    "",
    response_model=PropertyEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a draft listing. Requires the owner role.",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    caller: Caller = Depends(owner_only),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    property_obj = await property_service.create_property(caller, property_data)
    return PropertyEnvelope(
        data=PropertyResponse.model_validate(property_obj.to_dict()),
        message="Property created successfully"
    )


@router.put(
    "/{property_id}",
    response_model=PropertyEnvelope,
    summary="Update property",
    description="Edit one of the caller's draft or archived listings; published listings are read-only",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property UUID"),
    caller: Caller = Depends(owner_only),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    property_obj = await property_service.update_property(property_id, caller, property_data)
    return PropertyEnvelope(
        data=PropertyResponse.model_validate(property_obj.to_dict()),
        message="Property updated successfully"
    )


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete property",
    description="Soft delete: the listing is archived and hidden from the public",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property UUID"),
    caller: Caller = Depends(owner_or_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    await property_service.delete_property(property_id, caller)
    return MessageResponse(message="Property deleted successfully")


@router.put(
    "/{property_id}/publish",
    response_model=PropertyEnvelope,
    summary="Publish property",
    description=(
        "Publish a draft, or a listing its owner archived. "
        "Title, description, location, price and at least one image are required."
    ),
    responses=get_crud_error_responses()
)
async def publish_property(
    property_id: UUID = Path(..., description="Property UUID"),
    expected_version: Optional[int] = Query(
        None,
        ge=1,
        description="Reject the request if the listing's version differs"
    ),
    caller: Caller = Depends(owner_only),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    property_obj = await property_service.publish_property(property_id, caller, expected_version)
    return PropertyEnvelope(
        data=PropertyResponse.model_validate(property_obj.to_dict()),
        message="Property published successfully"
    )
