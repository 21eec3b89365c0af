"""
Authentication API endpoints for registration, login and the caller's profile.
"""

from fastapi import APIRouter, Depends, status
from marketplace.config import settings
from marketplace.models.user import User
from marketplace.services.auth import AuthService
from marketplace.schemas.auth import RegisterRequest, LoginRequest, AuthResponse, AuthData
from marketplace.schemas.user import UserResponse, UserData, UserDataResponse, ProfileUpdateRequest
from marketplace.schemas.common import MessageResponse
from marketplace.schemas.error import get_error_responses, get_auth_error_responses
from marketplace.utils.dependencies import get_auth_service, get_current_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


def auth_response(user: User, token: str, message: str) -> AuthResponse:
    return AuthResponse(
        data=AuthData(
            user=UserResponse.model_validate(user.to_dict()),
            token=token,
            token_type="bearer",
            expires_in=settings.token_expire_minutes * 60
        ),
        message=message
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    description="Create a user, owner or admin account and return a bearer token",
    responses=get_error_responses(400, 409)
)
async def register(
    user_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    user, token = await auth_service.register(user_data)
    return auth_response(user, token, "Registration successful")


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate with email and password, returns a JWT bearer token",
    responses=get_error_responses(400, 401)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Authenticate user and return a JWT token.

    Raises:
        InvalidCredentialsError: If the email is unknown, the password is wrong
            or the account is deactivated
    """
    user, token = await auth_service.login(login_data)
    return auth_response(user, token, "Login successful")


@router.get(
    "/me",
    response_model=UserDataResponse,
    summary="Get current user",
    responses=get_auth_error_responses()
)
async def get_me(current_user: User = Depends(get_current_user)) -> UserDataResponse:
    return UserDataResponse(data=UserData(user=UserResponse.model_validate(current_user.to_dict())))


@router.put(
    "/update",
    response_model=UserDataResponse,
    summary="Update profile",
    description="Change the caller's display name or avatar",
    responses=get_error_responses(400, 401, 403)
)
async def update_profile(
    profile_data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> UserDataResponse:
    user = await auth_service.update_profile(current_user, profile_data)
    return UserDataResponse(
        data=UserData(user=UserResponse.model_validate(user.to_dict())),
        message="Profile updated successfully"
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Tokens are stateless; clients discard theirs. This only acknowledges the request.",
    responses=get_error_responses(401)
)
async def logout(current_user: User = Depends(get_current_user)) -> MessageResponse:
    return MessageResponse(message="Logged out successfully")
