"""
用户相关的 Pydantic 模型
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from blog_server.schemas.base import BaseResponseModel


class UserRoleItem(BaseResponseModel):
    """用户详情中的角色项"""

    id: int
    role_name: str
    role_key: str
    is_enabled: bool


class UserUpdate(BaseModel):
    """更新用户请求模型, 只更新提交的字段"""

    email: Optional[EmailStr] = None
    nickname: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class UserResponse(BaseResponseModel):
    """用户响应模型"""

    id: int
    username: str
    email: str
    nickname: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    roles: List[UserRoleItem] = []
    created_at: datetime
    updated_at: datetime


class UserRoleAssign(BaseModel):
    """分配用户角色请求模型 (整体替换)"""

    role_ids: List[int] = Field(..., description="角色ID列表")


class UserQuery(BaseModel):
    """用户列表筛选条件"""

    username: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None
    role_id: Optional[int] = None


class PasswordChange(BaseModel):
    """修改密码请求模型"""

    old_password: str = Field(..., min_length=6, description="旧密码")
    new_password: str = Field(..., min_length=6, description="新密码")


class PasswordReset(BaseModel):
    """管理员重置密码请求模型"""

    new_password: str = Field(..., min_length=6, description="新密码")
