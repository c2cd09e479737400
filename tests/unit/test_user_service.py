"""Unit tests for UserService."""

from unittest.mock import AsyncMock

import pytest

from blog_server.core.exceptions import BadRequestError
from blog_server.models.permission import PermissionType
from blog_server.models.user import User
from blog_server.schemas.user import UserUpdate
from blog_server.services.user_service import UserService
from tests.factories import apply_update, make_permission, make_role


def make_service():
    mock_repo = AsyncMock()
    mock_role_repo = AsyncMock()
    mock_permission_repo = AsyncMock()
    service = UserService(
        AsyncMock(),
        repo=mock_repo,
        role_repo=mock_role_repo,
        permission_repo=mock_permission_repo,
    )
    return service, mock_repo, mock_role_repo, mock_permission_repo


class TestGetUserMenus:
    @pytest.mark.asyncio
    async def test_superuser_gets_all_menus(self):
        service, _, _, mock_permission_repo = make_service()
        mock_permission_repo.get_all_menus.return_value = [
            make_permission(1),
            make_permission(2, parent_id=1, perm_type=PermissionType.BUTTON),
        ]

        menus = await service.get_user_menus(1, [1])

        assert [m.id for m in menus] == [1]
        assert menus[0].children[0].perm_type == PermissionType.BUTTON
        mock_permission_repo.get_menus_by_role_ids.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_regular_user_gets_role_menus(self):
        service, _, _, mock_permission_repo = make_service()
        mock_permission_repo.get_menus_by_role_ids.return_value = [
            make_permission(8, parent_id=1),
            make_permission(9),
        ]

        menus = await service.get_user_menus(5, [2, 3])

        # 父菜单未分配给用户时子菜单不显示
        assert [m.id for m in menus] == [9]
        mock_permission_repo.get_menus_by_role_ids.assert_awaited_once_with([2, 3])
        mock_permission_repo.get_all_menus.assert_not_awaited()


class TestAssignRoles:
    @pytest.mark.asyncio
    async def test_unknown_role_ids_rejected(self):
        service, mock_repo, mock_role_repo, _ = make_service()
        mock_role_repo.get_by_ids.return_value = [make_role(2)]

        with pytest.raises(BadRequestError):
            await service.assign_roles(5, [2, 9])

        mock_repo.replace_roles.assert_not_awaited()


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_cannot_delete_self(self):
        service, mock_repo, _, _ = make_service()

        with pytest.raises(BadRequestError):
            await service.delete_user(5, operator_id=5)

        mock_repo.delete.assert_not_awaited()


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_null_for_required_fields_is_ignored(self):
        service, mock_repo, _, _ = make_service()
        user = User(id=5, username="alice", email="alice@example.com", is_active=True)
        mock_repo.get_with_roles.return_value = user
        mock_repo.update.side_effect = apply_update

        await service.update_user(
            5, UserUpdate.model_validate({"email": None, "is_active": None, "nickname": None})
        )

        assert mock_repo.update.await_args.kwargs == {"nickname": None}
        assert user.email == "alice@example.com"
        mock_repo.exists_by_field.assert_not_awaited()
