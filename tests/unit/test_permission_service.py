"""Unit tests for PermissionService."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from blog_server.core.exceptions import BadRequestError, ConflictError, ForbiddenError
from blog_server.models.permission import PermissionType
from blog_server.schemas.permission import PermissionCreate, PermissionUpdate
from blog_server.services.permission_service import PermissionService
from tests.factories import apply_update, make_permission


def make_service(permissions=()):
    by_id = {p.id: p for p in permissions}
    mock_repo = AsyncMock()
    mock_repo.get.side_effect = lambda permission_id: by_id.get(permission_id)
    mock_repo.get_parent_id.side_effect = (
        lambda permission_id: by_id[permission_id].parent_id if permission_id in by_id else None
    )
    mock_repo.exists_by_field.return_value = False
    mock_repo.update.side_effect = apply_update
    mock_repo.count_children.return_value = 0
    mock_repo.count_role_assignments.return_value = 0
    session = AsyncMock()
    return PermissionService(session, repo=mock_repo), mock_repo, session


class TestPermissionTree:
    @pytest.mark.asyncio
    async def test_tree_built_from_ordered_permissions(self):
        service, mock_repo, _ = make_service()
        mock_repo.get_all_ordered.return_value = [
            make_permission(1),
            make_permission(2, parent_id=1),
            make_permission(3, parent_id=2, perm_type=PermissionType.API, api_path="GET:/x"),
            make_permission(4, parent_id=0),
            make_permission(5, parent_id=77),
        ]

        roots = await service.get_permission_tree()

        assert [r.id for r in roots] == [1, 4]
        assert roots[0].children[0].children[0].api_path == "GET:/x"


class TestCreatePermission:
    def test_api_type_requires_api_path(self):
        with pytest.raises(ValidationError):
            PermissionCreate(perm_name="接口", perm_key="api", perm_type=PermissionType.API)

    def test_api_path_format_validated(self):
        with pytest.raises(ValidationError):
            PermissionCreate(
                perm_name="接口",
                perm_key="api",
                perm_type=PermissionType.API,
                api_path="/admin/api/v1/users",
            )

    @pytest.mark.asyncio
    async def test_missing_parent_rejected(self):
        service, mock_repo, _ = make_service()

        with pytest.raises(BadRequestError):
            await service.create_permission(
                PermissionCreate(perm_name="菜单", perm_key="menu", perm_type=1, parent_id=8)
            )

        mock_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_key_raises_conflict(self):
        service, mock_repo, _ = make_service()
        mock_repo.exists_by_field.side_effect = lambda field, value, exclude_id=None: field == "perm_key"

        with pytest.raises(ConflictError):
            await service.create_permission(
                PermissionCreate(perm_name="菜单", perm_key="menu", perm_type=1)
            )

    @pytest.mark.asyncio
    async def test_zero_parent_stored_as_root(self):
        service, mock_repo, session = make_service()
        mock_repo.create.return_value = make_permission(3)

        await service.create_permission(
            PermissionCreate(perm_name="菜单", perm_key="menu", perm_type=1, parent_id=0)
        )

        assert mock_repo.create.await_args.kwargs["parent_id"] is None
        session.commit.assert_awaited_once()


class TestUpdatePermission:
    @pytest.mark.asyncio
    async def test_parent_cycle_rejected(self):
        """Verify 1 cannot be moved under its grandchild 3."""
        service, mock_repo, session = make_service(
            [make_permission(1), make_permission(2, parent_id=1), make_permission(3, parent_id=2)]
        )

        with pytest.raises(BadRequestError):
            await service.update_permission(1, PermissionUpdate(parent_id=3))

        mock_repo.update.assert_not_awaited()
        session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_self_parent_rejected(self):
        service, _, _ = make_service([make_permission(1)])

        with pytest.raises(BadRequestError):
            await service.update_permission(1, PermissionUpdate(parent_id=1))

    @pytest.mark.asyncio
    async def test_valid_reparent(self):
        service, _, _ = make_service(
            [make_permission(1), make_permission(2), make_permission(3, parent_id=2)]
        )

        permission = await service.update_permission(3, PermissionUpdate(parent_id=1))

        assert permission.parent_id == 1

    @pytest.mark.asyncio
    async def test_switch_to_api_type_without_path_rejected(self):
        service, _, _ = make_service([make_permission(1)])

        with pytest.raises(BadRequestError):
            await service.update_permission(1, PermissionUpdate(perm_type=PermissionType.API))


class TestDeletePermission:
    @pytest.mark.asyncio
    async def test_permission_with_children_cannot_be_deleted(self):
        service, mock_repo, _ = make_service([make_permission(1)])
        mock_repo.count_children.return_value = 1

        with pytest.raises(BadRequestError):
            await service.delete_permission(1)

        mock_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_assigned_permission_cannot_be_deleted(self):
        service, mock_repo, _ = make_service([make_permission(1)])
        mock_repo.count_role_assignments.return_value = 2

        with pytest.raises(BadRequestError):
            await service.delete_permission(1)

        mock_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_builtin_permission_cannot_be_deleted(self):
        service, mock_repo, _ = make_service([make_permission(1, is_builtin=True)])

        with pytest.raises(ForbiddenError):
            await service.delete_permission(1)

        mock_repo.delete.assert_not_awaited()


class TestBuiltinPermission:
    @pytest.mark.asyncio
    async def test_cannot_be_made_non_builtin(self):
        service, mock_repo, _ = make_service([make_permission(1, is_builtin=True)])

        with pytest.raises(ForbiddenError):
            await service.update_permission(1, PermissionUpdate(is_builtin=False))

        mock_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_builtin_permission_can_be_renamed(self):
        service, _, _ = make_service([make_permission(1, is_builtin=True)])

        permission = await service.update_permission(1, PermissionUpdate(perm_name="系统"))

        assert permission.perm_name == "系统"
        assert permission.is_builtin is True


class TestApiPathUnique:
    @pytest.mark.asyncio
    async def test_duplicate_api_path_on_create(self):
        service, mock_repo, _ = make_service()
        mock_repo.exists_by_field.side_effect = (
            lambda field, value, exclude_id=None: field == "api_path"
        )

        with pytest.raises(ConflictError):
            await service.create_permission(
                PermissionCreate(
                    perm_name="用户接口",
                    perm_key="user:api",
                    perm_type=PermissionType.API,
                    api_path="*:/admin/api/v1/users/*",
                )
            )

        mock_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_menu_does_not_check_api_path(self):
        service, mock_repo, _ = make_service()
        mock_repo.create.return_value = make_permission(3)

        await service.create_permission(
            PermissionCreate(perm_name="菜单", perm_key="menu", perm_type=1)
        )

        checked = [call.args[0] for call in mock_repo.exists_by_field.await_args_list]
        assert "api_path" not in checked

    @pytest.mark.asyncio
    async def test_duplicate_api_path_on_update(self):
        service, mock_repo, _ = make_service(
            [make_permission(5, perm_type=PermissionType.API, api_path="GET:/a")]
        )
        mock_repo.exists_by_field.side_effect = (
            lambda field, value, exclude_id=None: field == "api_path" and exclude_id == 5
        )

        with pytest.raises(ConflictError):
            await service.update_permission(5, PermissionUpdate(api_path="GET:/b"))

        mock_repo.update.assert_not_awaited()


class TestPermissionPartialUpdate:
    @pytest.mark.asyncio
    async def test_null_for_required_fields_is_ignored(self):
        service, mock_repo, _ = make_service([make_permission(1)])

        await service.update_permission(
            1,
            PermissionUpdate.model_validate(
                {"perm_name": None, "is_enabled": None, "sort_order": None, "icon": None}
            ),
        )

        assert mock_repo.update.await_args.kwargs == {"icon": None}
