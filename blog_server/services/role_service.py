"""
角色管理服务

- 内置角色 (is_builtin) 不能删除, 也不能改为非内置
- 超级管理员角色 (ID 由 SUPERUSER_ROLE_ID 配置, 默认 1) 不能删除或禁用
"""

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.config import settings
from blog_server.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from blog_server.models.role import Role
from blog_server.repositories.base import drop_null_required
from blog_server.repositories.permission_repository import PermissionRepository
from blog_server.repositories.role_repository import RoleRepository
from blog_server.schemas.base import OptionItem, PageParams, PageResult
from blog_server.schemas.role import RoleCreate, RoleListResponse, RoleUpdate


class RoleService:
    def __init__(
        self,
        session: AsyncSession,
        repo: Optional[RoleRepository] = None,
        permission_repo: Optional[PermissionRepository] = None,
    ) -> None:
        self.session = session
        self.repo = repo or RoleRepository(session)
        self.permission_repo = permission_repo or PermissionRepository(session)

    @staticmethod
    def is_superuser_role(role_id: int) -> bool:
        return role_id == settings.SUPERUSER_ROLE_ID

    async def get_role(self, role_id: int) -> Role:
        role = await self.repo.get_with_permissions(role_id)
        if role is None:
            raise NotFoundError("角色不存在")
        return role

    async def list_roles(
        self, filters: Dict[str, Any], params: PageParams
    ) -> PageResult[RoleListResponse]:
        roles, total = await self.repo.list_roles(filters, params.offset, params.page_size)
        items = [
            RoleListResponse(
                id=role.id,
                role_name=role.role_name,
                role_key=role.role_key,
                role_sort=role.role_sort,
                role_desc=role.role_desc,
                is_default=role.is_default,
                is_enabled=role.is_enabled,
                is_builtin=role.is_builtin,
                permission_count=len(role.permissions),
                created_at=role.created_at,
            )
            for role in roles
        ]
        return PageResult.create(items, total, params)

    async def get_role_options(self) -> List[OptionItem]:
        roles = await self.repo.get_enabled_roles()
        return [OptionItem(label=role.role_name, value=role.id) for role in roles]

    async def create_role(self, data: RoleCreate) -> Role:
        await self._check_unique(data.role_name, data.role_key)
        await self._check_permissions_exist(data.permission_ids)

        role = await self.repo.create(**data.model_dump(exclude={"permission_ids"}))
        if data.permission_ids:
            await self.repo.replace_permissions(role.id, data.permission_ids)
        await self.session.commit()

        logger.info(f"角色创建成功: {role.role_key} (ID: {role.id})")
        return await self.get_role(role.id)

    async def update_role(self, role_id: int, data: RoleUpdate) -> Role:
        role = await self.get_role(role_id)
        values = drop_null_required(Role, data.model_dump(exclude_unset=True))

        if values.get("is_enabled") is False and self.is_superuser_role(role_id):
            raise ForbiddenError("内置超级管理员角色不能禁用")
        if role.is_builtin and values.get("is_builtin") is False:
            raise ForbiddenError("内置角色不能修改为非内置角色")
        await self._check_unique(
            values.get("role_name"), values.get("role_key"), exclude_id=role_id
        )

        await self.repo.update(role, **values)
        await self.session.commit()

        logger.info(f"角色更新成功: {role.role_key} (ID: {role_id})")
        return await self.get_role(role_id)

    async def update_role_status(self, role_id: int, enabled: bool) -> Role:
        role = await self.get_role(role_id)
        if not enabled and self.is_superuser_role(role_id):
            raise ForbiddenError("内置超级管理员角色不能禁用")

        await self.repo.update(role, is_enabled=enabled)
        await self.session.commit()
        logger.info(f"角色状态更新: ID={role_id}, is_enabled={enabled}")
        return await self.get_role(role_id)

    async def delete_role(self, role_id: int) -> None:
        """删除角色, 内置角色和已分配给用户的角色不能删除"""
        if self.is_superuser_role(role_id):
            raise ForbiddenError("内置超级管理员角色不能删除")
        role = await self.get_role(role_id)
        if role.is_builtin:
            raise ForbiddenError("内置角色不能删除")
        if await self.repo.count_users(role_id) > 0:
            raise BadRequestError("角色已分配给用户, 不能删除")

        await self.repo.delete(role)
        await self.session.commit()
        logger.info(f"角色删除成功: {role.role_key} (ID: {role_id})")

    async def get_role_permission_ids(self, role_id: int) -> List[int]:
        await self.get_role(role_id)
        return await self.repo.get_permission_ids(role_id)

    async def assign_permissions(self, role_id: int, permission_ids: Sequence[int]) -> Role:
        """整体替换角色的权限"""
        await self.get_role(role_id)
        await self._check_permissions_exist(permission_ids)

        await self.repo.replace_permissions(role_id, permission_ids)
        await self.session.commit()
        logger.info(f"角色权限已更新: role_id={role_id}, 权限数量={len(set(permission_ids))}")
        return await self.get_role(role_id)

    async def add_permission(self, role_id: int, permission_id: int) -> Role:
        """为角色添加一个权限, 已存在时不做处理"""
        await self.get_role(role_id)
        await self._check_permissions_exist([permission_id])

        if permission_id not in await self.repo.get_permission_ids(role_id):
            await self.repo.add_permission(role_id, permission_id)
            await self.session.commit()
            logger.info(f"角色添加权限: role_id={role_id}, permission_id={permission_id}")
        return await self.get_role(role_id)

    async def remove_permission(self, role_id: int, permission_id: int) -> Role:
        await self.get_role(role_id)
        removed = await self.repo.remove_permission(role_id, permission_id)
        await self.session.commit()
        if removed:
            logger.info(f"角色移除权限: role_id={role_id}, permission_id={permission_id}")
        return await self.get_role(role_id)

    async def _check_unique(
        self,
        role_name: Optional[str],
        role_key: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        if role_name and await self.repo.exists_by_field("role_name", role_name, exclude_id):
            raise ConflictError("角色名称已存在")
        if role_key and await self.repo.exists_by_field("role_key", role_key, exclude_id):
            raise ConflictError("角色标识已存在")

    async def _check_permissions_exist(self, permission_ids: Sequence[int]) -> None:
        if not permission_ids:
            return
        found = await self.permission_repo.get_by_ids(permission_ids)
        missing = set(permission_ids) - {p.id for p in found}
        if missing:
            raise BadRequestError(
                "部分权限ID不存在", details={"missing_ids": sorted(missing)}
            )
