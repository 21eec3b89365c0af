"""
Pydantic schemas for administrator endpoints.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from marketplace.schemas.property import PropertyResponse


class TogglePropertyRequest(BaseModel):
    """Moderation action; only "disable" and "enable" are accepted by the service."""

    action: str = Field(..., description='Either "disable" or "enable"', examples=["disable"])


class UserMetrics(BaseModel):
    total: int
    by_role: Dict[str, int]


class PropertyMetrics(BaseModel):
    total: int
    by_status: Dict[str, int]


class MetricsData(BaseModel):
    users: UserMetrics
    properties: PropertyMetrics
    recent_properties: List[PropertyResponse]


class MetricsResponse(BaseModel):
    success: bool = True
    data: MetricsData


class ToggleResponse(BaseModel):
    success: bool = True
    data: PropertyResponse
    message: Optional[str] = None
