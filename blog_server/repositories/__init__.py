"""
数据访问层

每个聚合一个仓储类, 封装同一个 AsyncSession 上的查询, 由服务层通过构造参数注入
"""

from blog_server.repositories.base import BaseRepository
from blog_server.repositories.category_repository import CategoryRepository
from blog_server.repositories.permission_repository import PermissionRepository
from blog_server.repositories.role_repository import RoleRepository
from blog_server.repositories.tag_repository import TagRepository
from blog_server.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "PermissionRepository",
    "RoleRepository",
    "TagRepository",
    "UserRepository",
]
