"""
权限仓储
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select

from blog_server.models.association import role_permissions
from blog_server.models.permission import Permission, PermissionType
from blog_server.models.role import Role
from blog_server.repositories.base import BaseRepository

# 菜单树只包含菜单和按钮
MENU_TYPES = (PermissionType.MENU, PermissionType.BUTTON)


class PermissionRepository(BaseRepository[Permission]):
    model = Permission

    async def get_all_ordered(self, enabled_only: bool = False) -> List[Permission]:
        """按 (sort_order, id) 获取全部权限"""
        stmt = select(Permission).order_by(Permission.sort_order, Permission.id)
        if enabled_only:
            stmt = stmt.where(Permission.is_enabled.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_api_permissions_by_role_ids(
        self, role_ids: Sequence[int]
    ) -> List[Permission]:
        """
        查询角色集合关联的接口权限

        只返回已启用角色上已启用, 且 api_path 非空的接口类型权限
        """
        if not role_ids:
            return []
        stmt = (
            select(Permission)
            .join(role_permissions, role_permissions.c.permission_id == Permission.id)
            .join(Role, Role.id == role_permissions.c.role_id)
            .where(
                role_permissions.c.role_id.in_(set(role_ids)),
                Role.is_enabled.is_(True),
                Permission.perm_type == PermissionType.API,
                Permission.is_enabled.is_(True),
                Permission.api_path.is_not(None),
                Permission.api_path != "",
            )
            .distinct()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_menus_by_role_ids(self, role_ids: Sequence[int]) -> List[Permission]:
        """查询角色集合关联的已启用菜单/按钮权限, 按 (sort_order, id) 排序"""
        if not role_ids:
            return []
        stmt = (
            select(Permission)
            .join(role_permissions, role_permissions.c.permission_id == Permission.id)
            .join(Role, Role.id == role_permissions.c.role_id)
            .where(
                role_permissions.c.role_id.in_(set(role_ids)),
                Role.is_enabled.is_(True),
                Permission.perm_type.in_(MENU_TYPES),
                Permission.is_enabled.is_(True),
            )
            .distinct()
            .order_by(Permission.sort_order, Permission.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_all_menus(self) -> List[Permission]:
        """全部已启用菜单/按钮权限, 超级管理员菜单使用"""
        stmt = (
            select(Permission)
            .where(
                Permission.perm_type.in_(MENU_TYPES),
                Permission.is_enabled.is_(True),
            )
            .order_by(Permission.sort_order, Permission.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_permissions(
        self, filters: Dict[str, Any], offset: int, limit: int
    ) -> tuple[List[Permission], int]:
        stmt = select(Permission)
        if filters.get("perm_name"):
            stmt = stmt.where(Permission.perm_name.ilike(f"%{filters['perm_name']}%"))
        if filters.get("perm_key"):
            stmt = stmt.where(Permission.perm_key.ilike(f"%{filters['perm_key']}%"))
        if filters.get("perm_type") is not None:
            stmt = stmt.where(Permission.perm_type == filters["perm_type"])
        if filters.get("parent_id") is not None:
            stmt = stmt.where(Permission.parent_id == filters["parent_id"])
        if filters.get("is_enabled") is not None:
            stmt = stmt.where(Permission.is_enabled.is_(filters["is_enabled"]))
        if filters.get("is_builtin") is not None:
            stmt = stmt.where(Permission.is_builtin.is_(filters["is_builtin"]))
        stmt = stmt.order_by(Permission.sort_order, Permission.id)
        return await self.paginate(stmt, offset, limit)

    async def count_children(self, permission_id: int) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Permission)
            .where(Permission.parent_id == permission_id)
        )
        return result.scalar_one()

    async def count_role_assignments(self, permission_id: int) -> int:
        """权限被多少个角色引用"""
        result = await self.session.execute(
            select(func.count())
            .select_from(role_permissions)
            .where(role_permissions.c.permission_id == permission_id)
        )
        return result.scalar_one()

    async def get_parent_id(self, permission_id: int) -> Optional[int]:
        result = await self.session.execute(
            select(Permission.parent_id).where(Permission.id == permission_id)
        )
        return result.scalar_one_or_none()
