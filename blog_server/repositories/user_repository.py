"""
用户仓储
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.orm import selectinload

from blog_server.models.association import user_roles
from blog_server.models.role import Role
from blog_server.models.user import User
from blog_server.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_with_roles(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.roles))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_username_or_email(self, account: str) -> Optional[User]:
        """登录时用户名和邮箱都可以作为账号"""
        result = await self.session.execute(
            select(User)
            .where(or_(User.username == account, User.email == account))
            .options(selectinload(User.roles))
        )
        return result.scalar_one_or_none()

    async def get_enabled_role_ids(self, user_id: int) -> List[int]:
        """用户已启用角色的ID列表, 写入 Access Token"""
        result = await self.session.execute(
            select(user_roles.c.role_id)
            .join(Role, Role.id == user_roles.c.role_id)
            .where(user_roles.c.user_id == user_id, Role.is_enabled.is_(True))
            .order_by(user_roles.c.role_id)
        )
        return list(result.scalars().all())

    async def list_users(
        self, filters: Dict[str, Any], offset: int, limit: int
    ) -> tuple[List[User], int]:
        stmt = select(User).options(selectinload(User.roles))
        if filters.get("username"):
            stmt = stmt.where(User.username.ilike(f"%{filters['username']}%"))
        if filters.get("email"):
            stmt = stmt.where(User.email.ilike(f"%{filters['email']}%"))
        if filters.get("is_active") is not None:
            stmt = stmt.where(User.is_active.is_(filters["is_active"]))
        if filters.get("role_id") is not None:
            stmt = stmt.where(
                User.id.in_(
                    select(user_roles.c.user_id).where(
                        user_roles.c.role_id == filters["role_id"]
                    )
                )
            )
        stmt = stmt.order_by(User.id)
        return await self.paginate(stmt, offset, limit)

    async def replace_roles(self, user_id: int, role_ids: Sequence[int]) -> None:
        """整体替换用户的角色"""
        await self.session.execute(
            delete(user_roles).where(user_roles.c.user_id == user_id)
        )
        ids = sorted(set(role_ids))
        if ids:
            await self.session.execute(
                insert(user_roles),
                [{"user_id": user_id, "role_id": rid} for rid in ids],
            )
        await self.session.flush()
