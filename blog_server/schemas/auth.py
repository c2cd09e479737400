"""
认证相关的 Pydantic 模型
"""

from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field


class Token(BaseModel):
    """登录响应模型"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # Access Token 过期时间(秒)


class UserLogin(BaseModel):
    """用户登录请求模型"""

    username: str = Field(..., min_length=3, max_length=100, description="用户名或邮箱")
    password: str = Field(..., min_length=6, description="密码")


class UserRegister(BaseModel):
    """用户注册请求模型"""

    username: str = Field(..., min_length=3, max_length=50, description="用户名")
    email: EmailStr = Field(..., description="邮箱")
    password: str = Field(..., min_length=6, description="密码")
    nickname: Optional[str] = Field(None, max_length=50, description="昵称")


class TokenRefresh(BaseModel):
    """刷新 Token 请求模型"""

    refresh_token: str = Field(..., description="Refresh Token")


class TokenRefreshResponse(BaseModel):
    """刷新 Token 响应模型"""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class LogoutRequest(BaseModel):
    """登出请求模型"""

    refresh_token: str = Field(..., description="要撤销的 Refresh Token")


class CurrentUserInfo(BaseModel):
    """
    Token 中解析出的当前用户信息

    由全局认证中间件写入 request.state.userinfo
    """

    user_id: int
    username: str
    role_ids: List[int] = []
