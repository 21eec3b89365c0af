"""
Integration tests for all API endpoints.
Tests complete request/response cycles against an in-memory database.
"""

import pytest
import uuid
from httpx import AsyncClient
from fastapi import status

from marketplace.models.user import User
from marketplace.models.property import Property
from tests.conftest import PropertyFactory, DEFAULT_PASSWORD, auth_headers, assert_error_envelope


class TestHealthEndpoints:

    @pytest.mark.asyncio
    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["data"]["api_prefix"] == "/api"

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/api/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["database"] == "connected"


class TestAuthenticationEndpoints:
    """Integration tests for authentication endpoints."""

    @pytest.mark.asyncio
    async def test_register(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/register", json={
            "name": "Abebe Kebede",
            "email": "abebe@example.com",
            "password": "secret123",
            "role": "owner"
        })

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registration successful"
        assert body["data"]["user"]["email"] == "abebe@example.com"
        assert body["data"]["user"]["role"] == "owner"
        assert body["data"]["token_type"] == "bearer"
        assert body["data"]["expires_in"] == 7 * 24 * 60 * 60
        assert "hashed_password" not in body["data"]["user"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post("/api/auth/register", json={
            "name": "Copy Cat",
            "email": "Owner@Example.com",
            "password": "secret123"
        })

        assert response.status_code == status.HTTP_409_CONFLICT
        assert_error_envelope(response.json(), "CONFLICT")

    @pytest.mark.asyncio
    async def test_register_invalid_payload(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/register", json={
            "name": "A",
            "email": "not-an-email",
            "password": "123"
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {detail["field"] for detail in response.json()["error"]["details"]}
        assert {"name", "email", "password"} <= fields

    @pytest.mark.asyncio
    async def test_register_unknown_role(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/register", json={
            "name": "Role Guesser",
            "email": "guesser@example.com",
            "password": "secret123",
            "role": "superuser"
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_login_success(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post("/api/auth/login", json={
            "email": test_owner.email,
            "password": DEFAULT_PASSWORD
        })

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["id"] == str(test_owner.id)
        assert body["data"]["token"]

    @pytest.mark.asyncio
    async def test_login_invalid_credentials(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post("/api/auth/login", json={
            "email": test_owner.email,
            "password": "wrongpassword"
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert_error_envelope(response.json(), "UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_login_inactive_user(self, async_client: AsyncClient, inactive_user: User):
        response = await async_client.post("/api/auth/login", json={
            "email": inactive_user.email,
            "password": DEFAULT_PASSWORD
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_me(self, async_client: AsyncClient, test_user: User):
        response = await async_client.get("/api/auth/me", headers=auth_headers(test_user))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["user"]["email"] == test_user.email

    @pytest.mark.asyncio
    async def test_me_without_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Not authorized, no token"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me", headers={"Authorization": "Bearer invalid.token.here"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Not authorized, token failed"

    @pytest.mark.asyncio
    async def test_me_inactive_user(self, async_client: AsyncClient, inactive_user: User):
        response = await async_client.get("/api/auth/me", headers=auth_headers(inactive_user))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_update_profile(self, async_client: AsyncClient, test_user: User):
        response = await async_client.put(
            "/api/auth/update",
            json={"name": "New Name"},
            headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Profile updated successfully"
        assert body["data"]["user"]["name"] == "New Name"

    @pytest.mark.asyncio
    async def test_logout(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post("/api/auth/logout", headers=auth_headers(test_user))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Logged out successfully"}


class TestPropertyEndpoints:
    """Integration tests for listing endpoints."""

    @pytest.mark.asyncio
    async def test_create_property(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post(
            "/api/properties",
            json=PropertyFactory.create_property_data(),
            headers=auth_headers(test_owner)
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["message"] == "Property created successfully"
        assert body["data"]["status"] == "draft"
        assert body["data"]["owner"]["id"] == str(test_owner.id)
        assert body["data"]["location"]["city"] == "Addis Ababa"
        assert body["data"]["version"] == 1

    @pytest.mark.asyncio
    async def test_create_property_ignores_status(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post(
            "/api/properties",
            json=PropertyFactory.create_property_data(status="published"),
            headers=auth_headers(test_owner)
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["status"] == "draft"

    @pytest.mark.asyncio
    async def test_create_property_unauthenticated(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties", json=PropertyFactory.create_property_data())

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_create_property_as_user(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post(
            "/api/properties",
            json=PropertyFactory.create_property_data(),
            headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "User role user is not authorized to access this route"

    @pytest.mark.asyncio
    async def test_create_property_negative_price(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.post(
            "/api/properties",
            json=PropertyFactory.create_property_data(price=-1),
            headers=auth_headers(test_owner)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["details"][0]["field"] == "price"

    @pytest.mark.asyncio
    async def test_list_properties_anonymous(
        self, async_client: AsyncClient, published_property: Property, draft_property: Property
    ):
        response = await async_client.get("/api/properties", params={"status": "draft"})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [item["id"] for item in body["data"]] == [str(published_property.id)]
        assert body["total"] == 1
        assert body["total_pages"] == 1
        assert body["current_page"] == 1
        assert body["data"][0].get("is_favorite") is None

    @pytest.mark.asyncio
    async def test_list_properties_filters(self, async_client: AsyncClient, published_property: Property):
        response = await async_client.get("/api/properties", params={
            "location": "addis",
            "min_price": 18000000,
            "category": "villa"
        })

        assert [item["id"] for item in response.json()["data"]] == [str(published_property.id)]

        response = await async_client.get("/api/properties", params={"location": "Hawassa"})
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_list_properties_limit_too_large(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties", params={"limit": 101})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_list_with_invalid_token_is_anonymous(self, async_client: AsyncClient, published_property: Property):
        response = await async_client.get("/api/properties", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["data"]) == 1

    @pytest.mark.asyncio
    async def test_get_property(self, async_client: AsyncClient, published_property: Property, test_user: User):
        response = await async_client.get(
            f"/api/properties/{published_property.id}",
            headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == str(published_property.id)
        assert data["is_favorite"] is False
        assert data["published_at"] is not None

    @pytest.mark.asyncio
    async def test_get_draft_anonymous(self, async_client: AsyncClient, draft_property: Property):
        response = await async_client.get(f"/api/properties/{draft_property.id}")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_get_draft_as_owner(self, async_client: AsyncClient, draft_property: Property, test_owner: User):
        response = await async_client.get(f"/api/properties/{draft_property.id}", headers=auth_headers(test_owner))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "draft"

    @pytest.mark.asyncio
    async def test_get_property_not_found(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/properties/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Property not found"

    @pytest.mark.asyncio
    async def test_my_properties(
        self, async_client: AsyncClient, draft_property: Property, published_property: Property, test_owner: User
    ):
        response = await async_client.get("/api/properties/my-properties/all", headers=auth_headers(test_owner))

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["count"] == 2
        assert {item["status"] for item in body["data"]} == {"draft", "published"}

    @pytest.mark.asyncio
    async def test_update_published_property(
        self, async_client: AsyncClient, published_property: Property, test_owner: User
    ):
        response = await async_client.put(
            f"/api/properties/{published_property.id}",
            json={"title": "Trying to edit a live listing"},
            headers=auth_headers(test_owner)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert_error_envelope(response.json(), "INVALID_TRANSITION")

    @pytest.mark.asyncio
    async def test_update_with_stale_version(
        self, async_client: AsyncClient, draft_property: Property, test_owner: User
    ):
        headers = auth_headers(test_owner)
        first = await async_client.put(
            f"/api/properties/{draft_property.id}",
            json={"bedrooms": 4, "expected_version": 1},
            headers=headers
        )
        second = await async_client.put(
            f"/api/properties/{draft_property.id}",
            json={"bedrooms": 5, "expected_version": 1},
            headers=headers
        )

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["data"]["version"] == 2
        assert second.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_update_by_other_owner(
        self, async_client: AsyncClient, draft_property: Property, other_owner: User
    ):
        response = await async_client.put(
            f"/api/properties/{draft_property.id}",
            json={"title": "Hijacked listing title"},
            headers=auth_headers(other_owner)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_delete_property(self, async_client: AsyncClient, published_property: Property, test_owner: User):
        response = await async_client.delete(
            f"/api/properties/{published_property.id}",
            headers=auth_headers(test_owner)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Property deleted successfully"}

        public = await async_client.get(f"/api/properties/{published_property.id}")
        assert public.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_delete_as_user(self, async_client: AsyncClient, published_property: Property, test_user: User):
        response = await async_client.delete(
            f"/api/properties/{published_property.id}",
            headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_publish_by_admin_rejected(
        self, async_client: AsyncClient, draft_property: Property, test_admin: User
    ):
        response = await async_client.put(
            f"/api/properties/{draft_property.id}/publish",
            headers=auth_headers(test_admin)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestFavoriteEndpoints:
    """Integration tests for favorite endpoints."""

    @pytest.mark.asyncio
    async def test_favorite_flow(self, async_client: AsyncClient, published_property: Property, test_user: User):
        headers = auth_headers(test_user)
        url = f"/api/favorites/{published_property.id}"

        added = await async_client.post(url, headers=headers)
        assert added.status_code == status.HTTP_201_CREATED
        assert added.json()["message"] == "Added to favorites"
        assert added.json()["data"]["property_id"] == str(published_property.id)

        duplicate = await async_client.post(url, headers=headers)
        assert duplicate.status_code == status.HTTP_409_CONFLICT
        assert duplicate.json()["message"] == "Property already in favorites"

        listed = await async_client.get("/api/favorites", headers=headers)
        assert listed.json()["count"] == 1
        assert listed.json()["data"][0]["id"] == str(published_property.id)
        assert listed.json()["data"][0]["favorited_at"]

        check = await async_client.get(f"/api/favorites/check/{published_property.id}", headers=headers)
        assert check.json()["data"] == {"is_favorite": True}

        browse = await async_client.get("/api/properties", headers=headers)
        assert browse.json()["data"][0]["is_favorite"] is True

        removed = await async_client.delete(url, headers=headers)
        assert removed.status_code == status.HTTP_200_OK
        assert removed.json()["message"] == "Removed from favorites"

        missing = await async_client.delete(url, headers=headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_favorite_draft(self, async_client: AsyncClient, draft_property: Property, test_user: User):
        response = await async_client.post(f"/api/favorites/{draft_property.id}", headers=auth_headers(test_user))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_favorites_require_authentication(self, async_client: AsyncClient):
        response = await async_client.get("/api/favorites")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestAdminEndpoints:
    """Integration tests for administrator endpoints."""

    @pytest.mark.asyncio
    async def test_metrics(self, async_client: AsyncClient, published_property: Property, test_admin: User):
        response = await async_client.get("/api/admin/metrics", headers=auth_headers(test_admin))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["users"]["by_role"] == {"user": 0, "owner": 1, "admin": 1}
        assert data["properties"]["by_status"]["published"] == 1
        assert data["recent_properties"][0]["id"] == str(published_property.id)

    @pytest.mark.asyncio
    async def test_metrics_forbidden_for_owner(self, async_client: AsyncClient, test_owner: User):
        response = await async_client.get("/api/admin/metrics", headers=auth_headers(test_owner))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_list_users(self, async_client: AsyncClient, test_user: User, test_admin: User):
        response = await async_client.get("/api/admin/users", params={"limit": 1}, headers=auth_headers(test_admin))

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["total"] == 2
        assert body["count"] == 1
        assert body["total_pages"] == 2

    @pytest.mark.asyncio
    async def test_list_all_properties(
        self, async_client: AsyncClient, draft_property: Property, published_property: Property, test_admin: User
    ):
        response = await async_client.get(
            "/api/admin/properties",
            params={"status": "draft"},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in response.json()["data"]] == [str(draft_property.id)]

    @pytest.mark.asyncio
    async def test_toggle_invalid_action(
        self, async_client: AsyncClient, published_property: Property, test_admin: User
    ):
        response = await async_client.put(
            f"/api/admin/properties/{published_property.id}/toggle",
            json={"action": "delete"},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert_error_envelope(response.json(), "INVALID_ARGUMENT")

    @pytest.mark.asyncio
    async def test_toggle_unknown_property(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.put(
            f"/api/admin/properties/{uuid.uuid4()}/toggle",
            json={"action": "disable"},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestMarketplaceScenarios:
    """End-to-end flows across registration, lifecycle, browsing and moderation."""

    @pytest.mark.asyncio
    async def test_owner_publishes_after_adding_an_image(self, async_client: AsyncClient):
        registered = await async_client.post("/api/auth/register", json={
            "name": "Selam Owner",
            "email": "selam@example.com",
            "password": "secret123",
            "role": "owner"
        })
        assert registered.status_code == status.HTTP_201_CREATED
        headers = {"Authorization": f"Bearer {registered.json()['data']['token']}"}

        created = await async_client.post(
            "/api/properties",
            json=PropertyFactory.create_property_data(
                title="Modern 3-Bedroom Apartment",
                price=2500000,
                images=[]
            ),
            headers=headers
        )
        assert created.status_code == status.HTTP_201_CREATED
        property_id = created.json()["data"]["id"]

        rejected = await async_client.put(f"/api/properties/{property_id}/publish", headers=headers)
        assert rejected.status_code == status.HTTP_400_BAD_REQUEST
        assert_error_envelope(rejected.json(), "INCOMPLETE_PUBLISH_DATA")
        assert "images" in rejected.json()["message"]

        still_draft = await async_client.get(f"/api/properties/{property_id}", headers=headers)
        assert still_draft.json()["data"]["status"] == "draft"

        updated = await async_client.put(
            f"/api/properties/{property_id}",
            json={"images": [{"url": "https://images.example.com/listings/selam-1.jpg", "caption": "Front"}]},
            headers=headers
        )
        assert updated.status_code == status.HTTP_200_OK

        published = await async_client.put(f"/api/properties/{property_id}/publish", headers=headers)
        assert published.status_code == status.HTTP_200_OK
        assert published.json()["message"] == "Property published successfully"
        assert published.json()["data"]["status"] == "published"
        assert published.json()["data"]["published_at"] is not None

        public = await async_client.get("/api/properties")
        assert property_id in [item["id"] for item in public.json()["data"]]

    @pytest.mark.asyncio
    async def test_admin_disable_and_enable(
        self, async_client: AsyncClient, published_property: Property, test_admin: User
    ):
        headers = auth_headers(test_admin)
        url = f"/api/admin/properties/{published_property.id}/toggle"
        listing_id = str(published_property.id)

        disabled = await async_client.put(url, json={"action": "disable"}, headers=headers)
        assert disabled.status_code == status.HTTP_200_OK
        assert disabled.json()["message"] == "Property disabled successfully"
        assert disabled.json()["data"]["status"] == "archived"
        assert disabled.json()["data"]["archived_reason"] == "admin_disabled"

        public = await async_client.get("/api/properties")
        assert listing_id not in [item["id"] for item in public.json()["data"]]

        enabled = await async_client.put(url, json={"action": "enable"}, headers=headers)
        assert enabled.status_code == status.HTTP_200_OK
        assert enabled.json()["message"] == "Property enabled successfully"
        assert enabled.json()["data"]["status"] == "published"

        public = await async_client.get("/api/properties")
        assert listing_id in [item["id"] for item in public.json()["data"]]

    @pytest.mark.asyncio
    async def test_admin_enables_listing_without_images(
        self, async_client: AsyncClient, property_service, test_owner: User, test_admin: User
    ):
        draft = await PropertyFactory.create_draft(property_service, test_owner, images=[])

        response = await async_client.put(
            f"/api/admin/properties/{draft.id}/toggle",
            json={"action": "enable"},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "published"
        assert response.json()["data"]["images"] == []
