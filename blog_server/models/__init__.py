# 导入所有模型，确保 SQLAlchemy 能够识别它们
from blog_server.models.user import User
from blog_server.models.role import Role
from blog_server.models.permission import Permission, PermissionType
from blog_server.models.category import Category
from blog_server.models.tag import Tag
from blog_server.models.association import user_roles, role_permissions

__all__ = [
    "User",
    "Role",
    "Permission",
    "PermissionType",
    "Category",
    "Tag",
    "user_roles",
    "role_permissions",
]
