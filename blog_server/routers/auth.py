"""
认证路由
- 用户注册
- 用户登录
- 刷新 Access Token
- 登出
"""

from fastapi import APIRouter, Depends, status

from blog_server.dependencies.services import get_auth_service
from blog_server.schemas.auth import (
    LogoutRequest,
    Token,
    TokenRefresh,
    TokenRefreshResponse,
    UserLogin,
    UserRegister,
)
from blog_server.schemas.base import MessageResponse
from blog_server.schemas.user import UserResponse
from blog_server.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["认证"])


@router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    user_data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    用户注册, 自动分配默认角色

    - **username**: 用户名(3-50个字符)
    - **email**: 邮箱地址
    - **password**: 密码(至少6个字符)
    - **nickname**: 昵称(可选)
    """
    user = await auth_service.register(user_data)
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        nickname=user.nickname,
        is_active=user.is_active,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


@router.post("/login", response_model=Token)
async def login(
    login_data: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    用户登录, 用户名或邮箱均可作为账号

    返回 Access Token 和 Refresh Token
    """
    return await auth_service.login(login_data)


@router.post("/refresh", response_model=TokenRefreshResponse)
async def refresh_token(
    token_data: TokenRefresh,
    auth_service: AuthService = Depends(get_auth_service),
):
    """使用 Refresh Token 换取新的 Access Token"""
    return await auth_service.refresh(token_data.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    logout_data: LogoutRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """登出, 撤销 Refresh Token"""
    await auth_service.logout(logout_data.refresh_token)
    return MessageResponse(message="已登出")
