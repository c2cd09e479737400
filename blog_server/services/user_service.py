"""
用户管理服务
"""

from typing import List, Optional, Sequence

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.config import settings
from blog_server.core.exceptions import BadRequestError, ConflictError, NotFoundError
from blog_server.core.security import get_password_hash, verify_password
from blog_server.models.user import User
from blog_server.repositories.base import drop_null_required
from blog_server.repositories.permission_repository import PermissionRepository
from blog_server.repositories.role_repository import RoleRepository
from blog_server.repositories.user_repository import UserRepository
from blog_server.schemas.base import PageParams, PageResult
from blog_server.schemas.permission import PermissionTreeNode
from blog_server.schemas.user import UserQuery, UserResponse, UserUpdate
from blog_server.services.permission_service import to_permission_tree


class UserService:
    def __init__(
        self,
        session: AsyncSession,
        repo: Optional[UserRepository] = None,
        role_repo: Optional[RoleRepository] = None,
        permission_repo: Optional[PermissionRepository] = None,
    ) -> None:
        self.session = session
        self.repo = repo or UserRepository(session)
        self.role_repo = role_repo or RoleRepository(session)
        self.permission_repo = permission_repo or PermissionRepository(session)

    async def get_user(self, user_id: int) -> User:
        user = await self.repo.get_with_roles(user_id)
        if user is None:
            raise NotFoundError("用户不存在")
        return user

    async def get_user_menus(
        self, user_id: int, role_ids: Sequence[int]
    ) -> List[PermissionTreeNode]:
        """
        获取用户的菜单树

        超级管理员返回全部已启用的菜单和按钮, 其他用户返回已启用角色关联的菜单和按钮
        """
        if settings.SUPERUSER_ROLE_ID in role_ids:
            permissions = await self.permission_repo.get_all_menus()
        else:
            permissions = await self.permission_repo.get_menus_by_role_ids(role_ids)

        logger.debug(f"加载用户菜单: user_id={user_id}, 菜单数量={len(permissions)}")
        return to_permission_tree(permissions)

    async def list_users(
        self, query: UserQuery, params: PageParams
    ) -> PageResult[UserResponse]:
        users, total = await self.repo.list_users(
            query.model_dump(exclude_none=True), params.offset, params.page_size
        )
        return PageResult.create(
            [UserResponse.model_validate(u) for u in users], total, params
        )

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        values = drop_null_required(User, data.model_dump(exclude_unset=True))

        email = values.get("email")
        if email and await self.repo.exists_by_field("email", email, exclude_id=user_id):
            raise ConflictError("邮箱已被其他用户使用")

        await self.repo.update(user, **values)
        await self.session.commit()
        logger.info(f"用户信息更新: {user.username} (ID: {user_id})")
        return await self.get_user(user_id)

    async def update_user_status(
        self, user_id: int, enabled: bool, operator_id: Optional[int] = None
    ) -> User:
        if not enabled and user_id == operator_id:
            raise BadRequestError("不能禁用当前登录的用户")
        user = await self.get_user(user_id)

        await self.repo.update(user, is_active=enabled)
        await self.session.commit()
        logger.info(f"用户状态更新: ID={user_id}, is_active={enabled}")
        return await self.get_user(user_id)

    async def assign_roles(self, user_id: int, role_ids: Sequence[int]) -> User:
        """整体替换用户的角色"""
        await self.get_user(user_id)

        found = await self.role_repo.get_by_ids(role_ids)
        missing = set(role_ids) - {role.id for role in found}
        if missing:
            raise BadRequestError("部分角色ID不存在", details={"missing_ids": sorted(missing)})

        await self.repo.replace_roles(user_id, role_ids)
        await self.session.commit()
        logger.info(f"用户角色已更新: user_id={user_id}, role_ids={sorted(set(role_ids))}")
        return await self.get_user(user_id)

    async def delete_user(self, user_id: int, operator_id: Optional[int] = None) -> None:
        if user_id == operator_id:
            raise BadRequestError("不能删除当前登录的用户")
        user = await self.get_user(user_id)

        await self.repo.delete(user)
        await self.session.commit()
        logger.info(f"用户删除成功: {user.username} (ID: {user_id})")

    async def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        user = await self.get_user(user_id)
        if not verify_password(old_password, user.hashed_password):
            raise BadRequestError("原密码错误")

        await self.repo.update(user, hashed_password=get_password_hash(new_password))
        await self.session.commit()
        logger.info(f"用户修改密码: {user.username} (ID: {user_id})")

    async def reset_password(self, user_id: int, new_password: str) -> None:
        """管理员重置用户密码"""
        user = await self.get_user(user_id)
        await self.repo.update(user, hashed_password=get_password_hash(new_password))
        await self.session.commit()
        logger.info(f"管理员重置密码: {user.username} (ID: {user_id})")
