"""
权限相关的 Pydantic 模型
"""

import re
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from blog_server.models.permission import PermissionType
from blog_server.schemas.base import BaseResponseModel

# METHOD:/path, METHOD 为 HTTP 方法或 *
API_PATH_PATTERN = re.compile(r"^(\*|[A-Za-z]+):/\S*$")


def _check_api_path(perm_type: Optional[int], api_path: Optional[str]) -> None:
    if perm_type == PermissionType.API and not api_path:
        raise ValueError("接口类型权限必须填写 api_path")
    if api_path and not API_PATH_PATTERN.match(api_path):
        raise ValueError("api_path 格式应为 METHOD:/path, 如 GET:/admin/api/v1/users/*")


class PermissionBase(BaseModel):
    """权限基础模型"""

    perm_name: str = Field(..., min_length=1, max_length=50, description="权限名称")
    perm_key: str = Field(..., min_length=1, max_length=50, description="权限标识")
    perm_type: PermissionType = Field(..., description="权限类型：1菜单，2按钮，3接口")
    parent_id: Optional[int] = Field(None, ge=0, description="父权限ID, 0或空为根节点")
    path: Optional[str] = Field(None, max_length=200, description="前端路由路径")
    api_path: Optional[str] = Field(None, max_length=200, description="接口访问描述")
    component: Optional[str] = Field(None, max_length=100, description="前端组件")
    icon: Optional[str] = Field(None, max_length=100, description="图标")
    sort_order: int = Field(default=0, description="排序")
    is_visible: bool = Field(default=True, description="是否显示")
    is_enabled: bool = Field(default=True, description="是否启用")
    is_builtin: bool = Field(default=False, description="是否内置")


class PermissionCreate(PermissionBase):
    """创建权限请求模型"""

    @model_validator(mode="after")
    def validate_api_path(self):
        _check_api_path(self.perm_type, self.api_path)
        return self


class PermissionUpdate(BaseModel):
    """更新权限请求模型, 只更新提交的字段"""

    perm_name: Optional[str] = Field(None, min_length=1, max_length=50)
    perm_key: Optional[str] = Field(None, min_length=1, max_length=50)
    perm_type: Optional[PermissionType] = None
    parent_id: Optional[int] = Field(None, ge=0)
    path: Optional[str] = Field(None, max_length=200)
    api_path: Optional[str] = Field(None, max_length=200)
    component: Optional[str] = Field(None, max_length=100)
    icon: Optional[str] = Field(None, max_length=100)
    sort_order: Optional[int] = None
    is_visible: Optional[bool] = None
    is_enabled: Optional[bool] = None
    is_builtin: Optional[bool] = None

    @model_validator(mode="after")
    def validate_api_path(self):
        if self.api_path:
            _check_api_path(self.perm_type, self.api_path)
        return self


class PermissionResponse(BaseResponseModel, PermissionBase):
    """权限响应模型"""

    id: int
    created_at: datetime
    updated_at: datetime


class PermissionTreeNode(BaseResponseModel):
    """权限树节点"""

    id: int
    parent_id: Optional[int] = None
    perm_name: str
    perm_key: str
    perm_type: int
    path: Optional[str] = None
    api_path: Optional[str] = None
    component: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0
    is_visible: bool = True
    is_enabled: bool = True
    is_builtin: bool = False
    children: List["PermissionTreeNode"] = []


class PermissionQuery(BaseModel):
    """权限列表筛选条件"""

    perm_name: Optional[str] = None
    perm_key: Optional[str] = None
    perm_type: Optional[PermissionType] = None
    parent_id: Optional[int] = None
    is_enabled: Optional[bool] = None
    is_builtin: Optional[bool] = None
