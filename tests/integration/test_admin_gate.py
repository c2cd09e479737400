"""HTTP tests for authentication, the RBAC gate and error rendering."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from blog_server.dependencies.services import (
    get_category_service,
    get_rbac_service,
    get_tag_service,
)
from blog_server.models.permission import PermissionType
from blog_server.services.category_service import CategoryService
from blog_server.services.rbac_service import RBACService
from blog_server.services.tag_service import TagService
from tests.conftest import auth_headers
from tests.factories import make_category, make_permission, make_tag

TAGS_URL = "/admin/api/v1/tags"


@pytest.fixture
def permission_repo(app):
    mock_repo = AsyncMock()
    mock_repo.get_api_permissions_by_role_ids.return_value = []
    app.dependency_overrides[get_rbac_service] = lambda: RBACService(mock_repo)
    return mock_repo


@pytest.fixture
def tag_repo(app):
    mock_repo = AsyncMock()
    mock_repo.list_tags.return_value = ([make_tag(1), make_tag(2)], 2)
    app.dependency_overrides[get_tag_service] = lambda: TagService(AsyncMock(), repo=mock_repo)
    return mock_repo


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token_returns_401(self, client):
        response = await client.get(TAGS_URL)

        assert response.status_code == 401
        body = response.json()
        assert body["error_code"] == "unauthorized"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_invalid_token_returns_401(self, client):
        response = await client.get(TAGS_URL, headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "req-123"


class TestRBACGate:
    @pytest.mark.asyncio
    async def test_superuser_bypasses_permission_check(self, client, permission_repo, tag_repo):
        response = await client.get(TAGS_URL, headers=auth_headers([1]))

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [t["id"] for t in body["list"]] == [1, 2]
        permission_repo.get_api_permissions_by_role_ids.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_without_roles_is_forbidden(self, client, permission_repo, tag_repo):
        response = await client.get(TAGS_URL, headers=auth_headers([]))

        assert response.status_code == 403
        assert response.json()["error_code"] == "forbidden"
        tag_repo.list_tags.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_matching_api_permission_allows(self, client, permission_repo, tag_repo):
        permission_repo.get_api_permissions_by_role_ids.return_value = [
            make_permission(1, perm_type=PermissionType.API, api_path="GET:/admin/api/v1/tags/*"),
        ]

        response = await client.get(TAGS_URL, headers=auth_headers([3]))

        assert response.status_code == 200
        permission_repo.get_api_permissions_by_role_ids.assert_awaited_once_with([3])

    @pytest.mark.asyncio
    async def test_method_mismatch_is_forbidden(self, client, permission_repo, tag_repo):
        permission_repo.get_api_permissions_by_role_ids.return_value = [
            make_permission(1, perm_type=PermissionType.API, api_path="GET:/admin/api/v1/tags/*"),
        ]

        response = await client.delete(f"{TAGS_URL}/1", headers=auth_headers([3]))

        assert response.status_code == 403
        tag_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_failure_returns_500_not_403(self, client, permission_repo, tag_repo):
        permission_repo.get_api_permissions_by_role_ids.side_effect = OperationalError(
            "SELECT 1", {}, Exception("connection refused")
        )

        response = await client.get(TAGS_URL, headers=auth_headers([3]))

        assert response.status_code == 500
        assert response.json()["error_code"] == "infrastructure_error"


class TestPublicEndpoints:
    @pytest.mark.asyncio
    async def test_category_tree_needs_no_token(self, app, client):
        mock_repo = AsyncMock()
        mock_repo.get_all_ordered.return_value = [
            make_category(1),
            make_category(2, parent_id=1, path="1.2"),
        ]
        app.dependency_overrides[get_category_service] = lambda: CategoryService(
            AsyncMock(), repo=mock_repo
        )

        response = await client.get("/api/v1/categories/tree")

        assert response.status_code == 200
        tree = response.json()
        assert tree[0]["id"] == 1
        assert tree[0]["children"][0]["id"] == 2
        mock_repo.get_all_ordered.assert_awaited_once_with(visible_only=True)

    @pytest.mark.asyncio
    async def test_missing_category_returns_404(self, app, client):
        mock_repo = AsyncMock()
        mock_repo.get.return_value = None
        app.dependency_overrides[get_category_service] = lambda: CategoryService(
            AsyncMock(), repo=mock_repo
        )

        response = await client.get("/api/v1/categories/99")

        assert response.status_code == 404
        assert response.json()["error_code"] == "not_found"

    @pytest.mark.asyncio
    async def test_user_menus_require_token(self, client):
        response = await client.get("/api/v1/users/me/menus")

        assert response.status_code == 401
