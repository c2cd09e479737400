"""
服务层依赖注入

每个请求使用同一个数据库会话构建服务, 测试中可以通过 app.dependency_overrides 替换
"""

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from blog_server.core.db import get_db
from blog_server.core.redis import get_redis
from blog_server.repositories.permission_repository import PermissionRepository
from blog_server.services.auth_service import AuthService
from blog_server.services.category_service import CategoryService
from blog_server.services.permission_service import PermissionService
from blog_server.services.rbac_service import RBACService
from blog_server.services.role_service import RoleService
from blog_server.services.tag_service import TagService
from blog_server.services.user_service import UserService
from blog_server.utils.token import TokenService


def get_rbac_service(db: AsyncSession = Depends(get_db)) -> RBACService:
    return RBACService(PermissionRepository(db))


def get_permission_service(db: AsyncSession = Depends(get_db)) -> PermissionService:
    return PermissionService(db)


def get_role_service(db: AsyncSession = Depends(get_db)) -> RoleService:
    return RoleService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_category_service(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_tag_service(db: AsyncSession = Depends(get_db)) -> TagService:
    return TagService(db)


def get_token_service(redis: Redis = Depends(get_redis)) -> TokenService:
    return TokenService(redis)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, token_service)
