"""Unit tests for RoleService."""

from unittest.mock import AsyncMock

import pytest

from blog_server.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from blog_server.schemas.role import RoleUpdate
from blog_server.services.role_service import RoleService
from tests.factories import apply_update, make_permission, make_role


def make_service(roles=()):
    by_id = {r.id: r for r in roles}
    mock_repo = AsyncMock()
    mock_repo.get_with_permissions.side_effect = lambda role_id: by_id.get(role_id)
    mock_repo.exists_by_field.return_value = False
    mock_repo.update.side_effect = apply_update
    mock_repo.count_users.return_value = 0
    mock_permission_repo = AsyncMock()
    session = AsyncMock()
    service = RoleService(session, repo=mock_repo, permission_repo=mock_permission_repo)
    return service, mock_repo, mock_permission_repo


class TestBuiltinRole:
    @pytest.mark.asyncio
    async def test_superuser_role_cannot_be_deleted(self):
        service, mock_repo, _ = make_service([make_role(1)])

        with pytest.raises(ForbiddenError):
            await service.delete_role(1)

        mock_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_superuser_role_cannot_be_disabled(self):
        service, mock_repo, _ = make_service([make_role(1)])

        with pytest.raises(ForbiddenError):
            await service.update_role_status(1, False)
        with pytest.raises(ForbiddenError):
            await service.update_role(1, RoleUpdate(is_enabled=False))

        mock_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_superuser_role_can_be_renamed(self):
        service, _, _ = make_service([make_role(1)])

        role = await service.update_role(1, RoleUpdate(role_desc="内置"))

        assert role.role_desc == "内置"


class TestDeleteRole:
    @pytest.mark.asyncio
    async def test_role_assigned_to_users_cannot_be_deleted(self):
        service, mock_repo, _ = make_service([make_role(3)])
        mock_repo.count_users.return_value = 4

        with pytest.raises(BadRequestError):
            await service.delete_role(3)

        mock_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_role_raises_not_found(self):
        service, _, _ = make_service()

        with pytest.raises(NotFoundError):
            await service.delete_role(3)


class TestAssignPermissions:
    @pytest.mark.asyncio
    async def test_unknown_permission_ids_rejected(self):
        service, mock_repo, mock_permission_repo = make_service([make_role(3)])
        mock_permission_repo.get_by_ids.return_value = [make_permission(1)]

        with pytest.raises(BadRequestError) as exc_info:
            await service.assign_permissions(3, [1, 2, 5])

        assert exc_info.value.details == {"missing_ids": [2, 5]}
        mock_repo.replace_permissions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replace_permissions(self):
        service, mock_repo, mock_permission_repo = make_service([make_role(3)])
        mock_permission_repo.get_by_ids.return_value = [make_permission(1), make_permission(2)]

        await service.assign_permissions(3, [1, 2])

        mock_repo.replace_permissions.assert_awaited_once_with(3, [1, 2])

    @pytest.mark.asyncio
    async def test_add_existing_permission_is_noop(self):
        service, mock_repo, mock_permission_repo = make_service([make_role(3)])
        mock_permission_repo.get_by_ids.return_value = [make_permission(1)]
        mock_repo.get_permission_ids.return_value = [1]

        await service.add_permission(3, 1)

        mock_repo.add_permission.assert_not_awaited()


class TestBuiltinFlag:
    @pytest.mark.asyncio
    async def test_builtin_role_cannot_be_deleted(self):
        service, mock_repo, _ = make_service([make_role(3, is_builtin=True)])

        with pytest.raises(ForbiddenError):
            await service.delete_role(3)

        mock_repo.count_users.assert_not_awaited()
        mock_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_builtin_role_cannot_be_made_non_builtin(self):
        service, mock_repo, _ = make_service([make_role(3, is_builtin=True)])

        with pytest.raises(ForbiddenError):
            await service.update_role(3, RoleUpdate(is_builtin=False))

        mock_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_builtin_role_can_be_disabled(self):
        role = make_role(3, is_builtin=True)
        service, _, _ = make_service([role])

        await service.update_role_status(3, False)

        assert role.is_enabled is False

    @pytest.mark.asyncio
    async def test_custom_role_can_be_deleted(self):
        role = make_role(7)
        service, mock_repo, _ = make_service([role])

        await service.delete_role(7)

        mock_repo.delete.assert_awaited_once_with(role)


class TestRolePartialUpdate:
    @pytest.mark.asyncio
    async def test_null_for_required_fields_is_ignored(self):
        service, mock_repo, _ = make_service([make_role(3)])

        await service.update_role(
            3,
            RoleUpdate.model_validate(
                {"role_name": None, "is_enabled": None, "role_sort": None, "role_desc": None}
            ),
        )

        assert mock_repo.update.await_args.kwargs == {"role_desc": None}
