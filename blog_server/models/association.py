"""
关联表模型
用于定义多对多关系
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Table, text

from blog_server.core.db import Base

# 用户-角色关联表
user_roles = Table(
    "sys_user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("sys_users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("sys_roles.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("now()")),
)

# 角色-权限关联表
role_permissions = Table(
    "sys_role_permissions",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("sys_roles.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "permission_id",
        Integer,
        ForeignKey("sys_permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("now()")),
)
