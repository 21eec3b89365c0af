"""
Administrator API endpoints for metrics, user listing and listing moderation.
"""

from fastapi import APIRouter, Depends, Query, Path
from typing import Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import UserRole
from marketplace.models.property import PropertyStatus
from marketplace.services.admin import AdminService
from marketplace.schemas.admin import TogglePropertyRequest, MetricsResponse, ToggleResponse
from marketplace.schemas.user import UserListResponse
from marketplace.schemas.property import PropertyResponse, PropertyListResponse
from marketplace.schemas.error import get_error_responses, get_auth_error_responses, get_crud_error_responses
from marketplace.utils.dependencies import get_admin_service, require_roles
from marketplace.utils.permissions import Caller


router = APIRouter(prefix="/admin", tags=["Admin"])

admin_only = require_roles(UserRole.ADMIN)


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    summary="Platform metrics",
    description="Users by role, listings by status and the five most recent listings",
    responses=get_auth_error_responses()
)
async def get_metrics(
    caller: Caller = Depends(admin_only),
    admin_service: AdminService = Depends(get_admin_service)
) -> MetricsResponse:
    metrics = await admin_service.get_metrics(caller)
    return MetricsResponse(data=metrics)


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List users",
    responses=get_error_responses(400, 401, 403)
)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    caller: Caller = Depends(admin_only),
    admin_service: AdminService = Depends(get_admin_service)
) -> UserListResponse:
    result = await admin_service.list_users(caller, page=page, limit=limit)
    return UserListResponse(**result)


@router.get(
    "/properties",
    response_model=PropertyListResponse,
    summary="List all properties",
    description="Every listing in any status",
    responses=get_error_responses(400, 401, 403)
)
async def list_all_properties(
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    caller: Caller = Depends(admin_only),
    admin_service: AdminService = Depends(get_admin_service)
) -> PropertyListResponse:
    result = await admin_service.list_properties(caller, page=page, limit=limit, status=status_filter)
    return PropertyListResponse(**result)


@router.put(
    "/properties/{property_id}/toggle",
    response_model=ToggleResponse,
    summary="Disable or enable a property",
    description='Body {"action": "disable"} archives the listing, {"action": "enable"} republishes it',
    responses=get_crud_error_responses()
)
async def toggle_property(
    toggle_data: TogglePropertyRequest,
    property_id: UUID = Path(..., description="Property UUID"),
    caller: Caller = Depends(admin_only),
    admin_service: AdminService = Depends(get_admin_service)
) -> ToggleResponse:
    property_obj = await admin_service.toggle_property(caller, property_id, toggle_data.action)
    return ToggleResponse(
        data=PropertyResponse.model_validate(property_obj.to_dict()),
        message=f"Property {toggle_data.action}d successfully"
    )
