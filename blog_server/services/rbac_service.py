"""
RBAC 接口权限检查

检查顺序:
1. 角色集合包含超级管理员角色 (ID 1) 时直接放行, 不查询数据库
2. 角色集合为空时直接拒绝, 不查询数据库
3. 查询角色关联的接口权限, 任一 api_path 与请求匹配即放行

查询失败抛出 InfrastructureError, 与"没有权限"严格区分
"""

from typing import Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from blog_server.core.config import settings
from blog_server.core.exceptions import InfrastructureError
from blog_server.repositories.permission_repository import PermissionRepository
from blog_server.utils.access import match_api_path


class RBACService:
    def __init__(self, permission_repo: PermissionRepository) -> None:
        self.permission_repo = permission_repo

    async def check_permission(
        self,
        user_id: int,
        role_ids: Sequence[int],
        request_path: str,
        request_method: str,
    ) -> bool:
        """
        检查用户是否可以访问指定接口

        Args:
            user_id: 用户ID, 仅用于日志
            role_ids: 用户已启用角色的ID列表
            request_path: 请求路径
            request_method: 请求方法

        Returns:
            bool: 是否允许访问

        Raises:
            InfrastructureError: 权限数据查询失败
        """
        if settings.SUPERUSER_ROLE_ID in role_ids:
            return True

        if not role_ids:
            logger.debug(f"用户没有任何角色: user_id={user_id}")
            return False

        try:
            permissions = await self.permission_repo.get_api_permissions_by_role_ids(role_ids)
        except SQLAlchemyError as e:
            logger.exception(f"查询接口权限失败: user_id={user_id}, role_ids={list(role_ids)}")
            raise InfrastructureError("权限检查失败, 请稍后重试") from e

        for permission in permissions:
            if match_api_path(permission.api_path, request_path, request_method):
                logger.debug(
                    f"权限匹配: user_id={user_id}, perm_key={permission.perm_key}, "
                    f"{request_method} {request_path}"
                )
                return True

        logger.debug(
            f"权限不足: user_id={user_id}, role_ids={list(role_ids)}, "
            f"{request_method} {request_path}"
        )
        return False
