"""
权限管理服务
"""

from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from blog_server.models.permission import Permission, PermissionType
from blog_server.repositories.base import drop_null_required
from blog_server.repositories.permission_repository import PermissionRepository
from blog_server.schemas.base import OptionItem, PageParams, PageResult
from blog_server.schemas.permission import (
    PermissionCreate,
    PermissionQuery,
    PermissionResponse,
    PermissionTreeNode,
    PermissionUpdate,
)
from blog_server.utils.tree import build_tree, is_root_node


def to_permission_tree(permissions: List[Permission]) -> List[PermissionTreeNode]:
    """把已排序的权限列表转换为树节点并构建树"""
    return build_tree(PermissionTreeNode.model_validate(p) for p in permissions)


class PermissionService:
    def __init__(
        self, session: AsyncSession, repo: Optional[PermissionRepository] = None
    ) -> None:
        self.session = session
        self.repo = repo or PermissionRepository(session)

    async def get_permission_tree(self) -> List[PermissionTreeNode]:
        """完整权限树, 包含禁用的权限"""
        permissions = await self.repo.get_all_ordered()
        return to_permission_tree(permissions)

    async def get_permission(self, permission_id: int) -> Permission:
        permission = await self.repo.get(permission_id)
        if permission is None:
            raise NotFoundError("权限不存在")
        return permission

    async def list_permissions(
        self, query: PermissionQuery, params: PageParams
    ) -> PageResult[PermissionResponse]:
        items, total = await self.repo.list_permissions(
            query.model_dump(exclude_none=True), params.offset, params.page_size
        )
        return PageResult.create(
            [PermissionResponse.model_validate(p) for p in items], total, params
        )

    async def get_permission_options(self) -> List[OptionItem]:
        permissions = await self.repo.get_all_ordered(enabled_only=True)
        return [OptionItem(label=p.perm_name, value=p.id) for p in permissions]

    async def create_permission(self, data: PermissionCreate) -> Permission:
        await self._check_unique(data.perm_name, data.perm_key)
        if data.perm_type == PermissionType.API:
            await self._check_api_path_unique(data.api_path)

        parent_id = None if is_root_node(data.parent_id) else data.parent_id
        if parent_id is not None and await self.repo.get(parent_id) is None:
            raise BadRequestError("父权限不存在")

        values = data.model_dump()
        values["parent_id"] = parent_id
        permission = await self.repo.create(**values)
        await self.session.commit()

        logger.info(f"权限创建成功: {permission.perm_key} (ID: {permission.id})")
        return permission

    async def update_permission(
        self, permission_id: int, data: PermissionUpdate
    ) -> Permission:
        permission = await self.get_permission(permission_id)
        values: Dict[str, Any] = drop_null_required(
            Permission, data.model_dump(exclude_unset=True)
        )

        if permission.is_builtin and values.get("is_builtin") is False:
            raise ForbiddenError("内置权限不能修改为非内置权限")

        await self._check_unique(
            values.get("perm_name"), values.get("perm_key"), exclude_id=permission_id
        )

        if "parent_id" in values:
            parent_id = None if is_root_node(values["parent_id"]) else values["parent_id"]
            if parent_id is not None:
                await self._check_parent(permission_id, parent_id)
            values["parent_id"] = parent_id

        perm_type = values.get("perm_type", permission.perm_type)
        api_path = values.get("api_path", permission.api_path)
        if perm_type == PermissionType.API and not api_path:
            raise BadRequestError("接口类型权限必须填写 api_path")
        if perm_type == PermissionType.API and ("api_path" in values or "perm_type" in values):
            await self._check_api_path_unique(api_path, exclude_id=permission_id)

        permission = await self.repo.update(permission, **values)
        await self.session.commit()

        logger.info(f"权限更新成功: {permission.perm_key} (ID: {permission.id})")
        return permission

    async def update_permission_status(self, permission_id: int, enabled: bool) -> Permission:
        permission = await self.get_permission(permission_id)
        permission = await self.repo.update(permission, is_enabled=enabled)
        await self.session.commit()
        logger.info(f"权限状态更新: ID={permission_id}, is_enabled={enabled}")
        return permission

    async def delete_permission(self, permission_id: int) -> None:
        """删除权限, 内置权限、存在子权限或已分配给角色时拒绝"""
        permission = await self.get_permission(permission_id)
        if permission.is_builtin:
            raise ForbiddenError("内置权限不能删除")

        if await self.repo.count_children(permission_id) > 0:
            raise BadRequestError("存在子权限, 不能删除")
        if await self.repo.count_role_assignments(permission_id) > 0:
            raise BadRequestError("权限已分配给角色, 不能删除")

        await self.repo.delete(permission)
        await self.session.commit()
        logger.info(f"权限删除成功: {permission.perm_key} (ID: {permission_id})")

    async def _check_unique(
        self,
        perm_name: Optional[str],
        perm_key: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        if perm_name and await self.repo.exists_by_field("perm_name", perm_name, exclude_id):
            raise ConflictError("权限名称已存在")
        if perm_key and await self.repo.exists_by_field("perm_key", perm_key, exclude_id):
            raise ConflictError("权限标识已存在")

    async def _check_api_path_unique(
        self, api_path: Optional[str], exclude_id: Optional[int] = None
    ) -> None:
        """接口类型权限的访问描述不能重复"""
        if api_path and await self.repo.exists_by_field("api_path", api_path, exclude_id):
            raise ConflictError("API路径已存在")

    async def _check_parent(self, permission_id: int, parent_id: int) -> None:
        """
        校验新的父权限: 必须存在, 且不能是自身或自身的子孙

        沿父链向上遍历, 遇到自身即成环
        """
        if parent_id == permission_id:
            raise BadRequestError("父权限不能是自身")
        if await self.repo.get(parent_id) is None:
            raise BadRequestError("父权限不存在")

        visited = set()
        current: Optional[int] = parent_id
        while not is_root_node(current):
            if current == permission_id:
                raise BadRequestError("父权限不能是自身的子权限")
            if current in visited:
                # 已有数据中存在环, 与本次更新无关
                logger.warning(f"权限父链存在环: permission_id={current}")
                raise BadRequestError("父权限的层级关系存在环")
            visited.add(current)
            current = await self.repo.get_parent_id(current)
