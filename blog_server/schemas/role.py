"""
角色相关的 Pydantic 模型
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from blog_server.schemas.base import BaseResponseModel


class RolePermissionItem(BaseResponseModel):
    """角色详情中的权限项"""

    id: int
    perm_name: str
    perm_key: str
    perm_type: int


class RoleBase(BaseModel):
    """角色基础模型"""

    role_name: str = Field(..., min_length=2, max_length=50, description="角色名称")
    role_key: str = Field(..., min_length=2, max_length=50, description="角色标识")
    role_sort: int = Field(default=0, ge=0, le=99, description="排序")
    role_desc: Optional[str] = Field(None, max_length=200, description="角色描述")
    is_default: bool = Field(default=False, description="是否为注册默认角色")
    is_enabled: bool = Field(default=True, description="是否启用")
    is_builtin: bool = Field(default=False, description="是否内置")


class RoleCreate(RoleBase):
    """创建角色请求模型"""

    permission_ids: List[int] = Field(default_factory=list, description="权限ID列表")


class RoleUpdate(BaseModel):
    """更新角色请求模型, 只更新提交的字段"""

    role_name: Optional[str] = Field(None, min_length=2, max_length=50)
    role_key: Optional[str] = Field(None, min_length=2, max_length=50)
    role_sort: Optional[int] = Field(None, ge=0, le=99)
    role_desc: Optional[str] = Field(None, max_length=200)
    is_default: Optional[bool] = None
    is_enabled: Optional[bool] = None
    is_builtin: Optional[bool] = None


class RolePermissionAssign(BaseModel):
    """角色权限分配请求模型 (整体替换)"""

    permission_ids: List[int] = Field(..., description="权限ID列表")


class RoleResponse(BaseResponseModel, RoleBase):
    """角色详情响应模型"""

    id: int
    permissions: List[RolePermissionItem] = []
    created_at: datetime
    updated_at: datetime


class RoleListResponse(BaseResponseModel):
    """角色列表项响应模型"""

    id: int
    role_name: str
    role_key: str
    role_sort: int
    role_desc: Optional[str] = None
    is_default: bool
    is_enabled: bool
    is_builtin: bool = False
    permission_count: int = 0
    created_at: datetime
