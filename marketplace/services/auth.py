"""
Authentication service for registration, login and token resolution.
Handles JWT token generation and validation and profile changes.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from marketplace.repositories.user import UserRepository
from marketplace.models.user import User
from marketplace.schemas.auth import RegisterRequest, LoginRequest
from marketplace.schemas.user import ProfileUpdateRequest
from marketplace.utils.auth import create_access_token, verify_token
from marketplace.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    UnauthorizedError,
    DuplicateEmailError,
    ValidationError
)
from jose import JWTError, ExpiredSignatureError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing accounts and bearer tokens.
    Tokens are stateless; every request re-reads the user so role and
    activation changes take effect immediately.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    def create_token(self, user: User) -> str:
        """Create an access token for the user."""
        return create_access_token(user_id=user.id, role=user.role)

    async def register(self, user_data: RegisterRequest) -> Tuple[User, str]:
        """
        Register a new account and sign it in.

        Args:
            user_data: Validated registration payload

        Returns:
            Tuple of (user, access_token)

        Raises:
            DuplicateEmailError: If the email is already registered
            ValidationError: If the email or password is rejected
        """
        existing_user = await self.user_repo.get_by_email(user_data.email)
        if existing_user:
            logger.warning(f"Registration attempt with existing email: {user_data.email}")
            raise DuplicateEmailError()

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except IntegrityError:
            # Another registration with the same email committed first
            raise DuplicateEmailError()
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"User registered: {user.email} (ID: {user.id}, role: {user.role.value})")
        return user, self.create_token(user)

    async def login(self, credentials: LoginRequest) -> Tuple[User, str]:
        """
        Authenticate user and create a token.

        Raises:
            InvalidCredentialsError: If the email is unknown, the account is
                inactive or the password does not match
        """
        user = await self.user_repo.authenticate_user(credentials.email, credentials.password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {credentials.email}")
            raise InvalidCredentialsError()

        return user, self.create_token(user)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            TokenExpiredError: If the token is expired
            InvalidTokenError: If the token is malformed or tampered with
            UnauthorizedError: If the subject no longer exists
            InactiveUserError: If the account is deactivated
        """
        try:
            token_payload = verify_token(token)
            user_id = uuid.UUID(token_payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            logger.debug(f"Rejected access token: {e}")
            raise InvalidTokenError()

        user = await self.user_repo.get_by_id(user_id)

        if not user:
            raise UnauthorizedError("Not authorized, user not found")

        if not user.is_active:
            raise InactiveUserError()

        return user

    async def update_profile(self, user: User, profile_data: ProfileUpdateRequest) -> User:
        """
        Update the caller's own name and avatar.
        Email, password and role are not changeable here.
        """
        changes = profile_data.model_dump(exclude_unset=True, exclude_none=True)

        for field, value in changes.items():
            setattr(user, field, value)

        if changes:
            user = await self.user_repo.save(user)
            logger.info(f"Profile updated for user {user.id}: {sorted(changes)}")

        return user
