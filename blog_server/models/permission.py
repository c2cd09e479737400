"""
权限数据库模型

权限同时承担菜单树节点和接口访问控制两种职责:
- 菜单/按钮类型用于前端渲染菜单树
- 接口类型通过 api_path (METHOD:path_pattern) 参与 RBAC 检查
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Integer, SmallInteger, String, text
from sqlalchemy.orm import relationship

from blog_server.core.db import Base


class PermissionType(enum.IntEnum):
    """权限类型"""

    MENU = 1
    BUTTON = 2
    API = 3


class Permission(Base):
    """权限模型"""

    __tablename__ = "sys_permissions"

    id = Column(Integer, primary_key=True, index=True)
    perm_name = Column(String(50), unique=True, nullable=False, comment="权限名称，显示用")
    perm_key = Column(
        String(50), unique=True, index=True, nullable=False, comment="权限标识，如 system:user:list"
    )
    perm_type = Column(
        SmallInteger,
        nullable=False,
        default=PermissionType.MENU,
        index=True,
        comment="权限类型：1菜单，2按钮，3接口",
    )
    # 不设外键约束, 为 NULL 或 0 都表示根节点
    parent_id = Column(Integer, nullable=True, index=True, comment="父权限ID")
    path = Column(String(200), nullable=True, comment="前端路由路径")
    api_path = Column(String(200), nullable=True, comment="接口访问描述，格式 METHOD:/path，支持 /* 前缀匹配")
    component = Column(String(100), nullable=True, comment="前端组件路径")
    icon = Column(String(100), nullable=True, comment="图标")
    sort_order = Column(SmallInteger, nullable=False, default=0, comment="排序")
    is_visible = Column(Boolean, nullable=False, default=True, comment="是否在菜单中显示")
    is_enabled = Column(Boolean, nullable=False, default=True, index=True, comment="是否启用")
    is_builtin = Column(
        Boolean, nullable=False, default=False, comment="是否内置，内置权限不能删除"
    )
    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=text("now()"), comment="创建时间"
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=text("now()"),
        comment="更新时间",
    )

    # 关系：角色-权限（多对多）
    roles = relationship(
        "Role", secondary="sys_role_permissions", back_populates="permissions"
    )

    def __repr__(self):
        return f"<Permission(id={self.id}, perm_key={self.perm_key})>"
