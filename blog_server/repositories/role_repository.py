"""
角色仓储
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import selectinload

from blog_server.models.association import role_permissions, user_roles
from blog_server.models.role import Role
from blog_server.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    model = Role

    async def get_with_permissions(self, role_id: int) -> Optional[Role]:
        result = await self.session.execute(
            select(Role)
            .where(Role.id == role_id)
            .options(selectinload(Role.permissions))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_roles(
        self, filters: Dict[str, Any], offset: int, limit: int
    ) -> tuple[List[Role], int]:
        stmt = select(Role).options(selectinload(Role.permissions))
        if filters.get("role_name"):
            stmt = stmt.where(Role.role_name.ilike(f"%{filters['role_name']}%"))
        if filters.get("is_enabled") is not None:
            stmt = stmt.where(Role.is_enabled.is_(filters["is_enabled"]))
        if filters.get("is_builtin") is not None:
            stmt = stmt.where(Role.is_builtin.is_(filters["is_builtin"]))
        stmt = stmt.order_by(Role.role_sort, Role.id)
        return await self.paginate(stmt, offset, limit)

    async def get_enabled_roles(self) -> List[Role]:
        result = await self.session.execute(
            select(Role).where(Role.is_enabled.is_(True)).order_by(Role.role_sort, Role.id)
        )
        return list(result.scalars().all())

    async def get_default_roles(self) -> List[Role]:
        """新注册用户自动分配的角色"""
        result = await self.session.execute(
            select(Role).where(Role.is_default.is_(True), Role.is_enabled.is_(True))
        )
        return list(result.scalars().all())

    async def get_permission_ids(self, role_id: int) -> List[int]:
        result = await self.session.execute(
            select(role_permissions.c.permission_id).where(
                role_permissions.c.role_id == role_id
            )
        )
        return list(result.scalars().all())

    async def replace_permissions(self, role_id: int, permission_ids: Sequence[int]) -> None:
        """整体替换角色的权限"""
        await self.session.execute(
            delete(role_permissions).where(role_permissions.c.role_id == role_id)
        )
        ids = sorted(set(permission_ids))
        if ids:
            await self.session.execute(
                insert(role_permissions),
                [{"role_id": role_id, "permission_id": pid} for pid in ids],
            )
        await self.session.flush()

    async def add_permission(self, role_id: int, permission_id: int) -> None:
        await self.session.execute(
            insert(role_permissions).values(role_id=role_id, permission_id=permission_id)
        )
        await self.session.flush()

    async def remove_permission(self, role_id: int, permission_id: int) -> int:
        """移除一个权限, 返回删除的行数"""
        result = await self.session.execute(
            delete(role_permissions).where(
                role_permissions.c.role_id == role_id,
                role_permissions.c.permission_id == permission_id,
            )
        )
        await self.session.flush()
        return result.rowcount

    async def count_users(self, role_id: int) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(user_roles)
            .where(user_roles.c.role_id == role_id)
        )
        return result.scalar_one()
