"""
Error response schemas for API documentation.
Mirrors the envelope produced by ErrorHandlerService.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field that caused the error", examples=["email"])
    message: str = Field(..., description="Human-readable error message")
    type: Optional[str] = Field(None, description="Error type identifier")


class ErrorInfo(BaseModel):
    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
    details: Optional[List[ErrorDetail]] = None


class APIErrorResponse(BaseModel):
    """Schema for the error envelope."""

    success: bool = False
    message: str
    error: ErrorInfo
    stack: Optional[List[str]] = Field(None, description="Only outside production")


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "timestamp": "2026-01-01T00:00:00Z",
            "request_id": "abc12345"
        }
    }


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {
        "description": "Bad Request - validation failure or invalid transition",
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example("INVALID_TRANSITION", "Cannot edit published properties")}},
    },
    401: {
        "description": "Unauthorized - missing, invalid or expired token",
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example("UNAUTHORIZED", "Not authorized, no token")}},
    },
    403: {
        "description": "Forbidden - insufficient role or not the owner",
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example("FORBIDDEN", "Not authorized to update this property")}},
    },
    404: {
        "description": "Not Found",
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example("NOT_FOUND", "Property not found")}},
    },
    409: {
        "description": "Conflict - duplicate or stale resource",
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example("CONFLICT", "Property already in favorites")}},
    },
    500: {
        "description": "Internal Server Error",
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example("INTERNAL_SERVER_ERROR", "Something went wrong!")}},
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for write operations on a single resource."""
    return get_error_responses(400, 401, 403, 404, 409, 500)
