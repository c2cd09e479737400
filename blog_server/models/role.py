"""
角色数据库模型
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, SmallInteger, String, text
from sqlalchemy.orm import relationship

from blog_server.core.db import Base


class Role(Base):
    """
    角色模型

    内置角色 (is_builtin) 不能删除; ID 为 1 的超级管理员角色还不能禁用
    """

    __tablename__ = "sys_roles"

    id = Column(Integer, primary_key=True, index=True)
    role_name = Column(String(50), unique=True, nullable=False, comment="角色名称")
    role_key = Column(
        String(50), unique=True, index=True, nullable=False, comment="角色标识，如 admin"
    )
    role_sort = Column(SmallInteger, nullable=False, default=0, comment="排序")
    role_desc = Column(String(200), nullable=True, comment="角色描述")
    is_default = Column(
        Boolean, nullable=False, default=False, comment="是否为新注册用户的默认角色"
    )
    is_enabled = Column(Boolean, nullable=False, default=True, comment="是否启用")
    is_builtin = Column(
        Boolean, nullable=False, default=False, comment="是否内置，内置角色不能删除"
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

    # 关系：用户-角色（多对多）
    users = relationship("User", secondary="sys_user_roles", back_populates="roles")

    # 关系：角色-权限（多对多）
    permissions = relationship(
        "Permission", secondary="sys_role_permissions", back_populates="roles"
    )

    def __repr__(self):
        return f"<Role(id={self.id}, role_key={self.role_key})>"
