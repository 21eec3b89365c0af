"""
Test configuration and fixtures for the property marketplace API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read once at import time, so the test environment must be in place first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-the-marketplace-suite-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
import uuid
from typing import AsyncGenerator, Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from httpx import AsyncClient, ASGITransport

from marketplace.main import app
from marketplace.database import Base, get_db, engine_options
from marketplace.models.user import User, UserRole
from marketplace.models.property import Property
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.favorite import FavoriteRepository
from marketplace.services.auth import AuthService
from marketplace.services.property import PropertyService
from marketplace.services.query import PropertyQueryService
from marketplace.services.favorite import FavoriteService
from marketplace.services.admin import AdminService
from marketplace.schemas.property import PropertyCreate
from marketplace.utils.auth import create_access_token
from marketplace.utils.permissions import Caller


TEST_DATABASE_URL = "sqlite+aiosqlite://"

DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(TEST_DATABASE_URL, **engine_options(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app; every request gets its own session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def favorite_repository(db_session: AsyncSession) -> FavoriteRepository:
    return FavoriteRepository(db_session)


@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def query_service(db_session: AsyncSession) -> PropertyQueryService:
    return PropertyQueryService(db_session)


@pytest.fixture
def favorite_service(db_session: AsyncSession) -> FavoriteService:
    return FavoriteService(db_session)


@pytest.fixture
def admin_service(db_session: AsyncSession) -> AdminService:
    return AdminService(db_session)


class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        name: str = "Test User",
        password: str = DEFAULT_PASSWORD,
        role: UserRole = UserRole.USER
    ) -> Dict[str, Any]:
        return {
            "email": email or f"test-{uuid.uuid4().hex[:8]}@example.com",
            "name": name,
            "password": password,
            "role": role,
        }

    @staticmethod
    async def create_user(user_repository: UserRepository, **kwargs) -> User:
        return await user_repository.create_user(UserFactory.create_user_data(**kwargs))


class PropertyFactory:
    """Factory for creating test listings."""

    @staticmethod
    def create_property_data(**overrides) -> Dict[str, Any]:
        """JSON-ready listing payload with every publish requirement present."""
        data = {
            "title": "Modern 3-Bedroom Apartment",
            "description": "Bright apartment with a balcony, close to shops and transport.",
            "location": {
                "address": "Bole Road 12",
                "city": "Addis Ababa",
                "country": "Ethiopia",
            },
            "price": 2500000,
            "images": [
                {"url": "https://images.example.com/listings/1.jpg", "caption": "Living room"}
            ],
            "category": "apartment",
            "bedrooms": 3,
            "bathrooms": 2,
            "area": 140.0,
            "amenities": ["parking", "balcony"],
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_draft(property_service: PropertyService, owner: User, **overrides) -> Property:
        payload = PropertyCreate(**PropertyFactory.create_property_data(**overrides))
        return await property_service.create_property(Caller.from_user(owner), payload)

    @staticmethod
    async def create_published(property_service: PropertyService, owner: User, **overrides) -> Property:
        draft = await PropertyFactory.create_draft(property_service, owner, **overrides)
        return await property_service.publish_property(draft.id, Caller.from_user(owner))


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for a stored user."""
    token = create_access_token(user_id=user.id, role=user.role)
    return {"Authorization": f"Bearer {token}"}


# Test fixtures for common data
@pytest.fixture
async def test_owner(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="owner@example.com",
        name="Test Owner",
        role=UserRole.OWNER
    )


@pytest.fixture
async def other_owner(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="other.owner@example.com",
        name="Other Owner",
        role=UserRole.OWNER
    )


@pytest.fixture
async def test_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="user@example.com",
        name="Test User",
        role=UserRole.USER
    )


@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="admin@example.com",
        name="Test Admin",
        role=UserRole.ADMIN
    )


@pytest.fixture
async def inactive_user(user_repository: UserRepository) -> User:
    user = await UserFactory.create_user(
        user_repository,
        email="inactive@example.com",
        name="Inactive User",
        role=UserRole.USER
    )
    user.is_active = False
    return await user_repository.save(user)


@pytest.fixture
def owner_caller(test_owner: User) -> Caller:
    return Caller.from_user(test_owner)


@pytest.fixture
def user_caller(test_user: User) -> Caller:
    return Caller.from_user(test_user)


@pytest.fixture
def admin_caller(test_admin: User) -> Caller:
    return Caller.from_user(test_admin)


@pytest.fixture
async def draft_property(property_service: PropertyService, test_owner: User) -> Property:
    return await PropertyFactory.create_draft(property_service, test_owner)


@pytest.fixture
async def published_property(property_service: PropertyService, test_owner: User) -> Property:
    return await PropertyFactory.create_published(
        property_service,
        test_owner,
        title="Family Villa with Garden",
        category="villa",
        price=18500000
    )


# Utility functions for tests
def assert_property_matches(data: Dict[str, Any], property_obj: Property):
    """Assert that a serialized listing describes the given property."""
    assert data["id"] == str(property_obj.id)
    assert data["title"] == property_obj.title
    assert data["owner_id"] == str(property_obj.owner_id)
    assert data["status"] == property_obj.status.value
    assert data["price"] == float(property_obj.price)


def assert_error_envelope(body: Dict[str, Any], code: str):
    """Assert the standard error body shape."""
    assert body["success"] is False
    assert body["message"]
    assert body["error"]["code"] == code
    assert body["error"]["timestamp"].endswith("Z")
