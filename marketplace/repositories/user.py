"""
User repository for authentication and account management operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marketplace.repositories.base import BaseRepository
from marketplace.models.user import User, UserRole
from marketplace.utils.auth import hash_password, verify_password
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Emails are stored lower case; password hashes never leave this layer and the auth helpers.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email normalization and password hashing.

        Args:
            user_data: Must include name, email, password; role defaults to USER

        Returns:
            Created user instance

        Raises:
            ValueError: If email or password validation fails
            IntegrityError: If the email is already taken
        """
        data = dict(user_data)
        email = User.validate_email_format(data.pop("email"))
        hashed_password = hash_password(data.pop("password"))

        create_data = {
            **data,
            "email": email,
            "hashed_password": hashed_password,
            "role": data.get("role") or UserRole.USER,
            "is_active": data.get("is_active", True),
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address, case-insensitively."""
        return await self.get_by_field("email", email.lower().strip())

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User instance if authentication successful, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.is_active:
            logger.debug(f"Authentication failed: user {email} is inactive")
            return None

        if not verify_password(password, user.hashed_password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        logger.info(f"User authenticated successfully: {email}")
        return user

    async def list_users(self, skip: int = 0, limit: int = 10) -> Tuple[List[User], int]:
        """
        Get all users, newest first.

        Returns:
            Tuple of (users list, total count)
        """
        users = await self.get_multi(skip=skip, limit=limit, order_by="-created_at")
        total = await self.count()
        return users, total

    async def count_by_role(self) -> Dict[str, int]:
        """Number of accounts per role; roles without accounts report 0."""
        try:
            result = await self.db.execute(
                select(User.role, func.count(User.id)).group_by(User.role)
            )
            counts = {role.value: 0 for role in UserRole}
            for role, total in result.all():
                counts[role.value] = total
            return counts
        except Exception as e:
            logger.error(f"Failed to count users by role: {e}")
            raise
