"""
Custom exception classes for the Property Marketplace API.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class for expected, client-safe errors."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Validation error exception."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[str] = None, detail: Optional[str] = None):
        if detail is None:
            detail = f"{resource} not found"
            if resource_id:
                detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Authentication required exception."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):
    """Access forbidden exception."""

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN"
        )


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT"
        )


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )


# Authentication specific exceptions
class InvalidCredentialsError(UnauthorizedError):
    """Invalid login credentials exception."""

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(detail)


class TokenExpiredError(UnauthorizedError):
    """JWT token expired exception."""

    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail)


class InvalidTokenError(UnauthorizedError):
    """Invalid JWT token exception."""

    def __init__(self, detail: str = "Not authorized, token failed"):
        super().__init__(detail)


class InactiveUserError(ForbiddenError):
    """Inactive user account exception."""

    def __init__(self, detail: str = "Account is deactivated"):
        super().__init__(detail)


class InsufficientPermissionsError(ForbiddenError):
    """Insufficient permissions exception."""

    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


class DuplicateEmailError(ConflictError):
    """Registration with an email that is already taken."""

    def __init__(self, detail: str = "User already exists with this email"):
        super().__init__(detail)


# Property specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self, property_id: str):
        super().__init__("Property")
        self.property_id = property_id


class PropertyOwnershipError(ForbiddenError):
    """Property ownership violation exception."""

    def __init__(self, action: str):
        super().__init__(f"Not authorized to {action} this property")


class InvalidTransitionError(BadRequestError):
    """Operation not allowed in the listing's current status."""

    def __init__(self, detail: str):
        super().__init__(detail, error_code="INVALID_TRANSITION")


class IncompletePublishDataError(BadRequestError):
    """A field required for publishing is missing."""

    def __init__(self, field: str):
        super().__init__(f"Cannot publish: {field} is required", error_code="INCOMPLETE_PUBLISH_DATA")
        self.field = field


class InvalidArgumentError(BadRequestError):
    """An argument is outside its allowed set of values."""

    def __init__(self, detail: str):
        super().__init__(detail, error_code="INVALID_ARGUMENT")


class StaleVersionError(ConflictError):
    """The listing changed since the caller last read it."""

    def __init__(self, detail: str = "Property was modified by another request, reload and try again"):
        super().__init__(detail)


# Favorite specific exceptions
class FavoriteNotFoundError(NotFoundError):
    """Favorite not found exception."""

    def __init__(self):
        super().__init__("Favorite", detail="Favorite not found")


class AlreadyFavoritedError(ConflictError):
    """The (user, property) pair is already a favorite."""

    def __init__(self):
        super().__init__("Property already in favorites")
